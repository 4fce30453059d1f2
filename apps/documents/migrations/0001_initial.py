# apps/documents/migrations/0001_initial.py
import apps.documents.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('clients', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ClientDocument',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.CharField(choices=[('ITR', 'Income Tax Return'), ('GST', 'GST'), ('ACCOUNTING', 'Accounting'), ('USER_DOCS', 'Client Uploads')], help_text='Folder the document is filed under', max_length=20)),
                ('year', models.CharField(blank=True, help_text='Assessment / financial year, e.g. 2025-26', max_length=10)),
                ('month', models.CharField(blank=True, help_text='Month for GST and accounting filings', max_length=20)),
                ('file', models.FileField(help_text='Stored file', upload_to=apps.documents.models.client_document_path)),
                ('file_name', models.CharField(help_text='Name shown to users', max_length=255)),
                ('original_file_name', models.CharField(help_text='Name of the file as uploaded', max_length=255)),
                ('mime_type', models.CharField(blank=True, help_text='MIME type (e.g., application/pdf, image/png)', max_length=100)),
                ('file_size', models.PositiveBigIntegerField(default=0, help_text='File size in bytes')),
                ('tags', models.JSONField(blank=True, default=list, help_text='Free-form labels')),
                ('is_archived', models.BooleanField(default=False, help_text='Hidden from default listings')),
                ('notes', models.TextField(blank=True, help_text='Internal notes')),
                ('client', models.ForeignKey(help_text='Client this document belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='documents', to='clients.client')),
                ('uploaded_by', models.ForeignKey(blank=True, help_text='User who uploaded this file', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='uploaded_documents', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['client', 'year', 'category'], name='document_client_year_cat_idx'),
                ],
            },
        ),
    ]
