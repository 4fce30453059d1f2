# apps/clients/tests/test_models.py
"""
Tests for Client normalization and ClientSummary.
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.clients.models import Client, ClientSummary
from users.models import User


class ClientModelTestCase(TestCase):

    def test_identifiers_normalized(self):
        client = Client.objects.create(
            name='Sharma Traders',
            email='  Accounts@SharmaTraders.IN ',
            phone='9876543210',
            pan_number='abcde1234f',
            gst_number='27abcde1234f1z5',
            physical_file_number='f-102',
        )
        client.refresh_from_db()
        self.assertEqual(client.email, 'accounts@sharmatraders.in')
        self.assertEqual(client.pan_number, 'ABCDE1234F')
        self.assertEqual(client.gst_number, '27ABCDE1234F1Z5')
        self.assertEqual(client.physical_file_number, 'F-102')

    def test_summary(self):
        client = Client.objects.create(name='Iyer & Sons', email='iyer@example.in', phone='9123456780')
        summary = ClientSummary.from_client(client)
        self.assertEqual(summary, ClientSummary(client.pk, 'Iyer & Sons', 'iyer@example.in', '9123456780'))


class ClientAPITestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.staff = User.objects.create_user(username='staff', password='pass', role=User.ROLE_STAFF)
        cls.existing = Client.objects.create(
            name='Sharma Traders', email='accounts@sharmatraders.in', phone='9876543210',
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.staff)

    def test_create_and_search(self):
        response = self.client.post('/api/v1/clients/', {
            'name': 'Iyer & Sons', 'email': 'IYER@example.in', 'phone': '9123456780',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'iyer@example.in')

        response = self.client.get('/api/v1/clients/', {'search': 'iyer'})
        self.assertEqual(len(response.data), 1)

    def test_duplicate_email_any_case(self):
        response = self.client.post('/api/v1/clients/', {
            'name': 'Copy', 'email': 'Accounts@SharmaTraders.in', 'phone': '1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)
