"""
Categorization errors

Input errors are the caller's fault. Data-integrity errors mean the
deployed category datasets are broken and are never retried.
Service outages (embedding API, LLM) are absorbed and never raised here.
"""


class CategorizationError(Exception):
    """Base class for categorization failures"""


class EmptyInputError(CategorizationError, ValueError):
    """Report text is empty or whitespace only"""


class CategoryDataError(CategorizationError):
    """Category or embedding dataset is missing, unreadable or inconsistent"""


class CategoryNotFoundError(CategoryDataError):
    """An embedding references a category id absent from the category list"""

    def __init__(self, category_id: str):
        super().__init__(f"Category not found: {category_id}")
        self.category_id = category_id


class DimensionMismatchError(CategoryDataError):
    """Two vectors from what should be the same embedding space differ in length"""

    def __init__(self, left: int, right: int):
        super().__init__(f"Vectors must have the same length (got {left} and {right})")
        self.left = left
        self.right = right


class NoCandidatesError(CategoryDataError):
    """The category set is empty so nothing can be ranked"""
