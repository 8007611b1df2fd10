"""
Award document reconciliation

Merges the documents of an evaluation request into the documents already on
the award, keyed by document id. The merge is an explicit ordered-dict union:
request ids first (request order), then ids only stored on the award (stored
order). Re-applying the same request yields the same list.
"""

from award_evaluation.award.commands import DocumentSpec
from award_evaluation.award.models import Document


def to_document(spec: DocumentSpec) -> Document:
    """Convert a requested document into a stored one"""
    return Document(
        id=spec.id,
        document_type=spec.document_type,
        title=spec.title,
        description=spec.description,
        related_lots=list(dict.fromkeys(spec.related_lots or [])),
    )


def reconcile_documents(
    requested: list[DocumentSpec], existing: list[Document]
) -> list[Document]:
    """
    Merge requested documents into existing ones by id

    - no requested documents: existing list unchanged
    - no existing documents: requested documents, converted
    - otherwise: shared ids keep the stored document with title, description
      and document type taken from the request; new ids are added; ids only
      on the award are kept as they are

    A repeated id in the request keeps its first position and its last value.

    Args:
        requested: Documents from the evaluation request
        existing: Documents currently stored on the award

    Returns:
        Reconciled document list
    """
    requested_by_id: dict[str, DocumentSpec] = {}
    for spec in requested:
        requested_by_id[spec.id] = spec
    if not requested_by_id:
        return list(existing)

    existing_by_id: dict[str, Document] = {document.id: document for document in existing}
    if not existing_by_id:
        return [to_document(spec) for spec in requested_by_id.values()]

    merged: dict[str, Document] = {}
    for document_id, spec in requested_by_id.items():
        stored = existing_by_id.get(document_id)
        if stored is None:
            merged[document_id] = to_document(spec)
        else:
            merged[document_id] = stored.model_copy(
                update={
                    "title": spec.title,
                    "description": spec.description,
                    "document_type": spec.document_type,
                }
            )

    for document_id, stored in existing_by_id.items():
        merged.setdefault(document_id, stored)

    return list(merged.values())
