"""
Custom exception classes for the application.

The broadcast core raises nothing of its own: registry operations cannot
fail and transport errors are handled per connection. These exceptions
belong to the settings store.
"""


class DatabaseError(Exception):
    """
    Database operation failed.

    Raised when the database cannot be reached or initialized.
    """

    pass


class SettingNotFoundError(Exception):
    """
    Setting key does not exist.

    Raised by the settings repository when a lookup by key finds no row.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Setting '{key}' not found")
