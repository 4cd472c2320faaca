"""Common annotated types for field validation.

These types provide consistent validation patterns across the package.
"""

from typing import Annotated

from pydantic import Field

# Pattern for backend document/blob identifiers
# Alphanumeric, period, hyphen, underscore; cannot start with a special char
IDENTIFIER_PATTERN = r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$"

# Loose email shape; the account service owns real validation
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


# Document or blob identifier assigned by the backend
DocumentId = Annotated[
    str, Field(min_length=1, max_length=36, pattern=IDENTIFIER_PATTERN)
]

# File size in bytes
ByteSize = Annotated[int, Field(ge=0)]

# Email address of a user a file is shared with
Email = Annotated[str, Field(min_length=3, pattern=EMAIL_PATTERN)]
