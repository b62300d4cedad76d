"""Batch change pipeline.

Takes a list of field-level edits from the editor, applies each one to its
page's DRAFT independently, and reports per-change success. A failure in one
change never blocks or rolls back another.

Changes are grouped by page so each page gets a single read-modify-write.
Within a page they apply in the order submitted, so two changes to the same
content key leave the later value in place.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

import structlog
from pydantic import ValidationError as PydanticValidationError

from sitecms.models.change import ChangeResult, FieldChange
from sitecms.services.publishing import PublishingService
from sitecms.utils.exceptions import PartialBatchFailure, SiteCMSError, ValidationError

logger = structlog.get_logger()

BatchStatus = Literal["ok", "partial", "failed"]


@dataclass
class BatchResult:
    """Aggregate outcome of a batch, in submission order."""

    results: list[ChangeResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def status(self) -> BatchStatus:
        if self.failed == 0:
            return "ok"
        if self.succeeded == 0:
            return "failed"
        return "partial"

    @property
    def failures(self) -> list[ChangeResult]:
        return [r for r in self.results if not r.success]

    def raise_for_failures(self) -> None:
        """Raise PartialBatchFailure if any change failed."""
        if self.failed:
            raise PartialBatchFailure(
                [r.model_dump(by_alias=True, exclude_none=True) for r in self.failures],
                self.total,
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "summary": {"total": self.total, "succeeded": self.succeeded, "failed": self.failed},
            "results": [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in self.results],
        }


def _raw_key(raw: Any) -> str:
    """Best-effort key label for a change that could not be parsed."""
    if not isinstance(raw, dict):
        return str(raw)
    if raw.get("contentKey"):
        return str(raw["contentKey"])
    parts = [raw.get("pageId", raw.get("page_id")), raw.get("sectionId", raw.get("section_id")),
             raw.get("fieldKey", raw.get("field_key"))]
    return ":".join("" if p is None else str(p) for p in parts)


def parse_change(raw: Any) -> FieldChange:
    """Parse one raw change.

    Raises:
        SiteCMSError: MalformedKeyError or ValidationError describing the problem.
    """
    if isinstance(raw, FieldChange):
        change = raw
    else:
        try:
            change = FieldChange.model_validate(raw)
        except PydanticValidationError as e:
            raise ValidationError([
                {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ])
    return change


class BatchChangePipeline:
    """Applies batches of field changes to page drafts."""

    def __init__(self, publishing: PublishingService | None = None):
        self._publishing = publishing

    @property
    def publishing(self) -> PublishingService:
        if self._publishing is None:
            self._publishing = PublishingService()
        return self._publishing

    def apply_batch(self, changes: list[Any], author: str | None = None) -> BatchResult:
        """Apply every change, each independently.

        Args:
            changes: FieldChange instances or raw dicts (``pageId``,
                ``sectionId``, ``fieldKey``, ``value``, ``fieldType``, or a
                ``contentKey`` token in place of the three key fields).
            author: Editor identity recorded on the drafts.

        Returns:
            BatchResult with one entry per submitted change, in order.
        """
        slots: list[ChangeResult | None] = [None] * len(changes)
        by_page: dict[str, list[tuple[int, FieldChange]]] = {}

        for index, raw in enumerate(changes):
            try:
                change = parse_change(raw)
            except SiteCMSError as e:
                slots[index] = ChangeResult(
                    key=_raw_key(raw), success=False, error=e.message, error_code=e.error_code
                )
                continue
            by_page.setdefault(change.page_id, []).append((index, change))

        for page_id, indexed in by_page.items():
            _, results = self.publishing.apply_changes(
                page_id, [change for _, change in indexed], author=author
            )
            for (index, _), result in zip(indexed, results):
                slots[index] = result

        batch = BatchResult(results=[r for r in slots if r is not None])
        logger.info(
            "Batch applied",
            total=batch.total,
            succeeded=batch.succeeded,
            failed=batch.failed,
            pages=len(by_page),
            status=batch.status,
        )
        return batch
