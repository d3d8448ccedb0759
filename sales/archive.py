"""
Archive of rendered order documents with a read flag.
"""
import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction

from .errors import DependencyError, NotFoundError
from .models import OrderDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchivedDocument:
    order_id: str
    content: bytes
    content_type: str
    filename: str
    was_read: bool


class ArchiveStore:
    """
    Stores one document per order.

    ``store`` writes the document unread; ``fetch_and_mark_read`` returns it
    and replaces its metadata with the read flag set.
    """

    def store(self, order_id, content: bytes) -> None:
        try:
            OrderDocument.objects.update_or_create(
                order_id=order_id,
                defaults={
                    "content": content,
                    "content_type": OrderDocument.CONTENT_TYPE,
                    "metadata": {OrderDocument.READ_FLAG: "false"},
                },
            )
        except DatabaseError as e:
            logger.error(f"Failed to archive document for order {order_id}: {e}", exc_info=True)
            raise DependencyError("Error archiving document", cause=e) from e

        logger.info(f"Archived document for order {order_id} ({len(content)} bytes)")

    def fetch_and_mark_read(self, order_id) -> ArchivedDocument:
        try:
            with transaction.atomic():
                document = OrderDocument.objects.select_for_update().filter(order_id=order_id).first()
                if document is None:
                    raise NotFoundError(f"No document archived for order {order_id}")

                fetched = ArchivedDocument(
                    order_id=str(document.order_id),
                    content=bytes(document.content),
                    content_type=document.content_type,
                    filename=document.filename,
                    was_read=document.is_read,
                )

                document.metadata = {OrderDocument.READ_FLAG: "true"}
                document.save(update_fields=["metadata", "stored_at"])
        except DatabaseError as e:
            logger.error(f"Failed to fetch document for order {order_id}: {e}", exc_info=True)
            raise DependencyError("Error fetching document", cause=e) from e

        logger.info(f"Document for order {order_id} fetched and marked read")
        return fetched
