"""Errors raised while opening an Xcode project."""


class ProjectError(Exception):
    """Base class for project-open failures."""


class ProjectNotFoundError(ProjectError):
    """
    No project exists at the given path.

    `searched_directory` is True when the path was treated as a directory
    and its entries were scanned for a project bundle.
    """
    def __init__(self, searched_directory: bool):
        self.searched_directory = searched_directory
        if searched_directory:
            message = "no Xcode project found in directory"
        else:
            message = "Xcode project not found"
        super().__init__(message)

    def __eq__(self, other):
        if not isinstance(other, ProjectNotFoundError):
            return NotImplemented
        return self.searched_directory == other.searched_directory

    def __hash__(self):
        return hash((ProjectNotFoundError, self.searched_directory))


class IncompatibleProjectError(ProjectError):
    """The path exists but is not a project this tool can read."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)

    def __eq__(self, other):
        if not isinstance(other, IncompatibleProjectError):
            return NotImplemented
        return self.reason == other.reason

    def __hash__(self):
        return hash((IncompatibleProjectError, self.reason))


class CyclicHierarchyError(Exception):
    """A group lists itself among its own ancestors."""
    def __init__(self, object_id: str):
        self.object_id = object_id
        super().__init__(f"Cyclic group membership at {object_id}")
