"""Service layer — business logic over the catalog store.

Every public method returns a :class:`ServiceResult`. Services must
never import from ``commands`` or ``output``.
"""
