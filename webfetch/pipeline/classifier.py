"""Decide whether a retrieved payload should be treated as HTML."""

from __future__ import annotations

from webfetch.pipeline.models import ClassificationResult, RetrievedPayload

_SNIFF_CHARS = 100


def classify(payload: RetrievedPayload) -> ClassificationResult:
    """Classify *payload* as HTML if any of these hold:

    * the first 100 characters of the body contain ``<html`` (case-insensitive),
    * the declared content type contains ``text/html``,
    * no content type was declared at all.

    The rule is permissive on purpose: when in doubt the page is simplified.
    """
    is_html = (
        "<html" in payload.body[:_SNIFF_CHARS].lower()
        or "text/html" in payload.content_type
        or not payload.content_type
    )
    return ClassificationResult(is_html=is_html)
