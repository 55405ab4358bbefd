"""Versioned encode/decode boundary shared by all stored entities."""

from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from collabmatch.core.errors import InvalidDocumentError

DocumentT = TypeVar("DocumentT", bound="Document")


class Document(BaseModel):
    """Base for entities persisted in the profile and messaging store.

    Validation happens here, once, when a record is built or read back.
    Documents carry a ``schema_version`` so that readers can refuse records
    written by a newer release instead of silently misreading them.
    """

    SCHEMA_VERSION: ClassVar[int] = 1

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    @classmethod
    def build(cls: type[DocumentT], **fields: Any) -> DocumentT:
        """Construct a validated record.

        Raises:
            InvalidDocumentError: If any field fails validation.
        """
        try:
            return cls.model_validate(fields)
        except PydanticValidationError as e:
            raise InvalidDocumentError(f"Invalid {cls.__name__}: {e.errors()[0]['msg']}") from e

    @classmethod
    def from_document(cls: type[DocumentT], doc: dict[str, Any]) -> DocumentT:
        """Decode a stored document.

        Raises:
            InvalidDocumentError: If the document is malformed or was written
                with a newer schema version.
        """
        version = doc.get("schema_version") or 1
        if not isinstance(version, int) or version > cls.SCHEMA_VERSION:
            raise InvalidDocumentError(
                f"Unsupported {cls.__name__} schema version: {version!r}"
            )
        # NULL columns fall back to field defaults
        fields = {k: v for k, v in doc.items() if k != "schema_version" and v is not None}
        return cls.build(**fields)

    def to_document(self, partial: bool = False) -> dict[str, Any]:
        """Encode for storage.

        Fields holding ``None`` are omitted. With ``partial`` only the fields
        that were explicitly set are encoded, for merge writes.
        """
        doc = self.model_dump(mode="json", exclude_none=True, exclude_unset=partial)
        doc["schema_version"] = self.SCHEMA_VERSION
        return doc
