"""Domain exceptions that represent business rule violations."""

from typing import Optional


class DomainException(Exception):
    """Base exception for all domain-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


# Validation Domain Exceptions
class ValidationException(DomainException):
    """Base exception for validation errors."""


class InvalidDataFormat(ValidationException):
    """Invalid data format provided."""

    def __init__(self, field: str, expected_format: str):
        super().__init__(
            f"Invalid format for {field}, expected: {expected_format}",
            "INVALID_DATA_FORMAT",
        )


class InvalidCategoryId(ValidationException):
    """Category id is not a 24-character hex string."""

    def __init__(self, field: str = "category ID"):
        super().__init__(f"Invalid {field} format", "INVALID_CATEGORY_ID")


class RequiredFieldMissing(ValidationException):
    """Required field is missing."""

    def __init__(self, field: str):
        super().__init__(
            f"Required field missing: {field}", "REQUIRED_FIELD_MISSING"
        )


# Resource Domain Exceptions
class ResourceException(DomainException):
    """Base exception for resource-related errors."""


class ResourceNotFound(ResourceException):
    """Generic resource not found."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}", "RESOURCE_NOT_FOUND"
        )


class ResourceConflict(ResourceException):
    """Operation would break an invariant of an existing resource."""


# Category Domain Exceptions
class CategoryNotFound(ResourceNotFound):
    """Category not found in the system."""

    def __init__(self, category_id: str):
        super().__init__("Category", category_id)
        self.error_code = "CATEGORY_NOT_FOUND"
        self.category_id = category_id


class ParentCategoryNotFound(ResourceException):
    """Referenced parent category does not exist."""

    def __init__(self, parent_id: str):
        super().__init__("Parent category not found", "PARENT_NOT_FOUND")
        self.parent_id = parent_id


class DuplicateCategorySlug(ResourceConflict):
    """Another category already uses the derived slug."""

    def __init__(self, slug: str):
        super().__init__(
            "Category with this name already exists", "DUPLICATE_SLUG"
        )
        self.slug = slug


class SelfParentReference(ResourceConflict):
    def __init__(self):
        super().__init__(
            "Category cannot be its own parent", "SELF_PARENT_REFERENCE"
        )


class CircularCategoryReference(ResourceConflict):
    def __init__(self):
        super().__init__(
            "Cannot set parent: would create circular reference",
            "CIRCULAR_REFERENCE",
        )


class CategoryHasChildren(ResourceConflict):
    def __init__(self, child_count: int):
        super().__init__(
            "Cannot delete category with subcategories. "
            "Please delete subcategories first.",
            "CATEGORY_HAS_CHILDREN",
        )
        self.child_count = child_count


class CategoryHasServices(ResourceConflict):
    def __init__(self, service_count: int):
        super().__init__(
            "Cannot delete category with services. "
            "Please move or delete services first.",
            "CATEGORY_HAS_SERVICES",
        )
        self.service_count = service_count


class CategoriesInUse(ResourceConflict):
    def __init__(self, service_count: int):
        super().__init__(
            "Cannot clear categories while services reference them. "
            "Please move or delete services first.",
            "CATEGORIES_IN_USE",
        )
        self.service_count = service_count
