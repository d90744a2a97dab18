# backend/geopap/errors.py


class GeopapError(Exception):
    """Base class for archive import errors."""


# Fatal: abort the whole run


class MissingArchiveError(GeopapError):
    """Raised when the archive folder has no geopaparazzi.db."""


class UnsupportedProjectionError(GeopapError):
    """Raised when no transform exists from WGS84 to the target CRS."""


class DataSourceError(GeopapError):
    """Raised when the archive database cannot be read or holds corrupt rows."""


# Record-local: the record is skipped and the run continues


class ReprojectionError(GeopapError):
    """Raised when a single geometry cannot be transformed."""


class MediaNameError(GeopapError):
    """Raised when a media file name carries no date/time tokens."""


class SidecarError(GeopapError):
    """Raised when a .properties sidecar lacks or garbles a required key."""


class SchemaError(GeopapError):
    """Raised when a feature does not match its dataset schema."""
