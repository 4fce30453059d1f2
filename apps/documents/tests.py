# apps/documents/tests.py
"""
Tests for FileAccessGate and DocumentService.
"""
import shutil
import tempfile
from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.core.exceptions import PermissionDenied
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings

from apps.billing.exceptions import UpstreamUnavailable
from apps.billing.gate import AccessGateEvaluator
from apps.billing.services import InvoiceService
from apps.clients.models import Client
from apps.documents.models import ClientDocument
from apps.documents.services import DocumentService, FileAccessGate, FileAccessRestricted
from users.models import User

TODAY = date(2026, 4, 15)


class FileAccessGateTestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.client_record = Client.objects.create(
            name='Sharma Traders', email='accounts@sharmatraders.in', phone='9876543210',
        )
        cls.other_client = Client.objects.create(
            name='Iyer & Sons', email='iyer@example.in', phone='9123456780',
        )
        cls.staff = User.objects.create_user(username='staff', password='pass', role=User.ROLE_STAFF)
        cls.portal_user = User.objects.create_user(
            username='sharma', password='pass', role=User.ROLE_CLIENT, client=cls.client_record,
        )
        cls.unbound_user = User.objects.create_user(username='nobody', password='pass', role=User.ROLE_CLIENT)

    def setUp(self):
        self.gate = FileAccessGate(AccessGateEvaluator(today=lambda: TODAY))

    def make_overdue_invoice(self, client=None):
        return InvoiceService(self.staff).create(
            client_id=(client or self.client_record).pk,
            items=[{'name': 'ITR Filing', 'quantity': 1, 'unit_price': Decimal('1500')}],
            due_date=TODAY - timedelta(days=1),
            issue_date=TODAY - timedelta(days=31),
        )

    def test_client_without_overdue_passes(self):
        self.gate.check(self.portal_user, self.client_record.pk)

    def test_client_with_overdue_restricted(self):
        invoice = self.make_overdue_invoice()
        with self.assertRaises(FileAccessRestricted) as ctx:
            self.gate.check(self.portal_user, self.client_record.pk)

        summary = ctx.exception.summary
        self.assertFalse(summary.has_file_access)
        self.assertEqual(summary.overdue_details[0].invoice_number, invoice.invoice_number)
        self.assertEqual(summary.total_outstanding, Decimal('1500.00'))

    def test_firm_user_never_restricted(self):
        self.make_overdue_invoice()
        self.gate.check(self.staff, self.client_record.pk)

    def test_other_clients_documents_denied(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.gate.check(self.portal_user, self.other_client.pk)
        self.assertNotIsInstance(ctx.exception, FileAccessRestricted)

    def test_unbound_client_user_denied(self):
        with self.assertRaises(PermissionDenied):
            self.gate.check(self.unbound_user, self.client_record.pk)

    def test_client_id_as_string(self):
        self.gate.check(self.portal_user, str(self.client_record.pk))

    def test_billing_outage_allows_access(self):
        evaluator = mock.Mock()
        evaluator.evaluate.side_effect = UpstreamUnavailable("Billing data is temporarily unavailable")

        with self.assertLogs('apps.documents.services', level='WARNING'):
            FileAccessGate(evaluator).check(self.portal_user, self.client_record.pk)
        evaluator.evaluate.assert_called_once_with(self.client_record.pk)


class DocumentServiceTestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.client_record = Client.objects.create(
            name='Sharma Traders', email='accounts@sharmatraders.in', phone='9876543210',
        )
        cls.staff = User.objects.create_user(username='staff', password='pass', role=User.ROLE_STAFF)

    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.settings_override = override_settings(MEDIA_ROOT=self.media_root)
        self.settings_override.enable()
        self.service = DocumentService(self.staff)

    def tearDown(self):
        self.settings_override.disable()
        shutil.rmtree(self.media_root, ignore_errors=True)

    def pdf(self, name='ITR-V.pdf', content=b'%PDF-1.4 fake content'):
        return SimpleUploadedFile(name, content, content_type='application/pdf')

    def test_upload(self):
        document = self.service.upload(
            self.client_record, self.pdf(), ClientDocument.Category.ITR,
            year='2025-26', tags=['acknowledgement'],
        )
        self.assertEqual(document.client, self.client_record)
        self.assertEqual(document.file_name, 'ITR-V.pdf')
        self.assertEqual(document.original_file_name, 'ITR-V.pdf')
        self.assertEqual(document.mime_type, 'application/pdf')
        self.assertEqual(document.file_size, len(b'%PDF-1.4 fake content'))
        self.assertEqual(document.tags, ['acknowledgement'])
        self.assertEqual(document.uploaded_by, self.staff)
        self.assertTrue(document.file.name.startswith(f'clients/{self.client_record.pk}/itr/'))

    def test_display_name_override(self):
        document = self.service.upload(
            self.client_record, self.pdf(), ClientDocument.Category.GST, file_name='GSTR-3B March',
        )
        self.assertEqual(document.file_name, 'GSTR-3B March')
        self.assertEqual(document.original_file_name, 'ITR-V.pdf')

    def test_rejects_extension(self):
        self.assertTrue(self.service.validate(self.pdf(name='payload.exe')))
        with self.assertRaises(ValueError):
            self.service.upload(self.client_record, self.pdf(name='payload.exe'), ClientDocument.Category.ITR)
        self.assertEqual(ClientDocument.objects.count(), 0)

    @override_settings(DOCUMENT_MAX_UPLOAD_MB=0)
    def test_rejects_size(self):
        errors = self.service.validate(self.pdf())
        self.assertEqual(len(errors), 1)
        self.assertIn('exceeds maximum', errors[0])

    def test_rejects_category(self):
        with self.assertRaises(ValueError):
            self.service.upload(self.client_record, self.pdf(), 'PAYROLL')

    def test_list_and_delete(self):
        itr = self.service.upload(self.client_record, self.pdf(), ClientDocument.Category.ITR, year='2025-26')
        self.service.upload(self.client_record, self.pdf(name='books.xlsx'), ClientDocument.Category.ACCOUNTING)
        archived = self.service.upload(self.client_record, self.pdf(name='old.pdf'), ClientDocument.Category.ITR)
        archived.is_archived = True
        archived.save()

        self.assertEqual(self.service.list_for_client(self.client_record.pk).count(), 2)
        self.assertEqual(
            list(self.service.list_for_client(self.client_record.pk, category='ITR', year='2025-26')),
            [itr],
        )
        self.assertEqual(
            self.service.list_for_client(self.client_record.pk, include_archived=True).count(), 3,
        )

        stored_name = itr.file.name
        self.service.delete(itr)
        self.assertFalse(ClientDocument.objects.filter(pk=itr.pk).exists())
        self.assertFalse(itr.file.storage.exists(stored_name))
