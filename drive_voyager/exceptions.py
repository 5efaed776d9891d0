class DriveVoyagerError(Exception):
    """Base class for errors raised by the Drive Voyager service."""


class ConfigurationError(DriveVoyagerError):
    """Startup configuration is missing or unusable."""


class FolderCycleError(DriveVoyagerError):
    """A folder was reached again while still being expanded."""

    def __init__(self, folder_id: str):
        super().__init__(f"Folder '{folder_id}' contains itself; refusing to expand.")
        self.folder_id = folder_id
