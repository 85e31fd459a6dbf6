class RecipeVaultError(Exception):
    pass


class StorageFault(RecipeVaultError):
    """The persistence adapter could not read or write."""


class InvalidPhotoInput(RecipeVaultError):
    """The selected blob does not declare an image media type."""


class PhotoDecodeFailure(RecipeVaultError):
    """The blob could not be turned into a data reference."""
