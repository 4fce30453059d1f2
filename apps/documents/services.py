# apps/documents/services.py
"""
Service layer for client documents.

Provides:
- FileAccessGate: Decides whether a user may see a client's documents
- DocumentService: Upload, delete and list client documents
"""
import logging
from pathlib import Path

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.core.files.storage import default_storage

from apps.billing.exceptions import UpstreamUnavailable
from apps.billing.gate import AccessGateEvaluator

from .models import ClientDocument

logger = logging.getLogger(__name__)


class FileAccessRestricted(PermissionDenied):
    """
    A CLIENT user's documents are locked because of overdue invoices.

    Carries the payment summary so the response can tell the client what
    is outstanding.
    """
    status_code = 403
    code = 'file_access_restricted'

    def __init__(self, summary):
        super().__init__("File access restricted due to pending payments")
        self.summary = summary


class FileAccessGate:
    """
    Access check run before any document listing or download.

    - Firm users (admin, manager, staff, intern) always pass.
    - CLIENT users may only reach their own client's documents.
    - CLIENT users with any overdue invoice are refused.
    - If billing data cannot be read, access is granted.

    Usage:
        FileAccessGate().check(request.user, client_id)
    """

    def __init__(self, evaluator=None):
        self.evaluator = evaluator or AccessGateEvaluator()

    def check(self, user, client_id):
        """
        Raises:
            PermissionDenied: CLIENT user asking for another client's documents
            FileAccessRestricted: CLIENT user with overdue invoices
        """
        if not user.is_client_user:
            return

        if user.client_id is None or str(user.client_id) != str(client_id):
            logger.info(f"Document access denied: user={user.pk} is not bound to client={client_id}")
            raise PermissionDenied("Access denied")

        try:
            summary = self.evaluator.evaluate(client_id)
        except UpstreamUnavailable as exc:
            logger.warning(
                f"Payment status unavailable for client={client_id}, allowing document access: {exc}"
            )
            return

        if not summary.has_file_access:
            logger.info(
                f"Document access restricted: client={client_id}, "
                f"overdue={summary.overdue_invoices}, outstanding={summary.total_outstanding}"
            )
            raise FileAccessRestricted(summary)


class DocumentService:
    """
    Service for managing client documents.

    Handles:
    - File validation (extension, size)
    - Upload and storage
    - Deletion (file + record)
    - Listing a client's documents

    Usage:
        svc = DocumentService(user=request.user)
        doc = svc.upload(client, file_obj, category='ITR', year='2025-26')
        docs = svc.list_for_client(client.id)
        svc.delete(doc)
    """

    ALLOWED_EXTENSIONS = {
        '.pdf', '.png', '.jpg', '.jpeg', '.gif', '.webp',
        '.doc', '.docx', '.xls', '.xlsx', '.csv', '.txt', '.zip',
    }

    def __init__(self, user=None):
        self.user = user

    @property
    def max_file_size(self):
        return settings.DOCUMENT_MAX_UPLOAD_MB * 1024 * 1024

    def _get_extension(self, filename: str) -> str:
        return Path(filename).suffix.lower()

    def validate(self, file) -> list[str]:
        """
        Validate a file object. Returns list of error messages (empty = valid).
        """
        errors = []
        ext = self._get_extension(file.name)
        if ext not in self.ALLOWED_EXTENSIONS:
            errors.append(
                f"File type '{ext}' is not allowed. "
                f"Allowed: {', '.join(sorted(self.ALLOWED_EXTENSIONS))}"
            )
        if file.size > self.max_file_size:
            mb = file.size / (1024 * 1024)
            errors.append(
                f"File size {mb:.1f}MB exceeds maximum of {settings.DOCUMENT_MAX_UPLOAD_MB}MB."
            )
        return errors

    def upload(self, client, file, category, year='', month='', file_name='', tags=None, notes='') -> ClientDocument:
        """
        Validate and store a file for a client.

        Args:
            client: Client instance
            file: Django UploadedFile object
            category: ClientDocument.Category value
            year, month: Optional filing period
            file_name: Display name (defaults to the uploaded name)
            tags: Optional list of labels
            notes: Optional internal notes

        Returns:
            ClientDocument instance

        Raises:
            ValueError: If validation fails
        """
        errors = self.validate(file)
        if category not in ClientDocument.Category.values:
            errors.append(f"Unknown category '{category}'.")
        if errors:
            raise ValueError('; '.join(errors))

        document = ClientDocument(
            client=client,
            category=category,
            year=year or '',
            month=month or '',
            file_name=file_name or file.name,
            original_file_name=file.name,
            mime_type=getattr(file, 'content_type', '') or '',
            file_size=file.size,
            tags=list(tags or []),
            notes=notes or '',
            uploaded_by=self.user,
        )
        document.file = file
        document.save()

        logger.info(
            "Document uploaded: client=%s, category=%s, file=%s, size=%s",
            client.pk, category, document.file_name, document.file_size,
        )
        return document

    def delete(self, document: ClientDocument) -> None:
        """
        Delete a document: removes the stored file and the record.
        """
        if document.file:
            try:
                if default_storage.exists(document.file.name):
                    default_storage.delete(document.file.name)
            except OSError as exc:
                logger.warning("Failed to delete file %s: %s", document.file.name, exc)

        document.delete()

    def list_for_client(self, client_id, category=None, year=None, include_archived=False):
        """Documents of one client, newest first."""
        qs = ClientDocument.objects.filter(client_id=client_id).select_related('uploaded_by')
        if category:
            qs = qs.filter(category=category)
        if year:
            qs = qs.filter(year=year)
        if not include_archived:
            qs = qs.filter(is_archived=False)
        return qs
