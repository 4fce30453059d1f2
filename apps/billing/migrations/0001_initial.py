# apps/billing/migrations/0001_initial.py
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
import simple_history.models
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
            name='ServiceItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Service name', max_length=200)),
                ('description', models.TextField(blank=True, help_text='Service description')),
                ('base_price', models.DecimalField(decimal_places=2, help_text='Default unit price', max_digits=12)),
                ('category', models.CharField(choices=[('ITR', 'Income Tax Return'), ('GST', 'GST'), ('ACCOUNTING', 'Accounting'), ('OTHER', 'Other')], help_text='Service category', max_length=20)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive services cannot be picked for new invoice items')),
            ],
            options={
                'verbose_name': 'Service',
                'verbose_name_plural': 'Services',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='InvoiceSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('period', models.CharField(help_text='YYYYMM', max_length=6, unique=True)),
                ('next_value', models.PositiveIntegerField(default=1, help_text='Next number to use')),
            ],
        ),
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('invoice_number', models.CharField(help_text='Invoice number (immutable)', max_length=50, unique=True)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of item amounts', max_digits=12)),
                ('tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Flat tax amount', max_digits=12)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Subtotal plus tax', max_digits=12)),
                ('paid_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of payments', max_digits=12)),
                ('balance_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Amount still owed (never negative)', max_digits=12)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('PARTIAL', 'Partially Paid'), ('PAID', 'Paid'), ('CANCELLED', 'Cancelled')], default='PENDING', help_text='Invoice status', max_length=20)),
                ('issue_date', models.DateField(default=django.utils.timezone.localdate, help_text='Date invoice was issued')),
                ('due_date', models.DateField(help_text='Payment due date')),
                ('notes', models.TextField(blank=True, help_text='Notes shown on the invoice')),
                ('version', models.PositiveIntegerField(default=1, help_text='Incremented on every change')),
                ('client', models.ForeignKey(help_text='Client being billed (immutable)', on_delete=django.db.models.deletion.PROTECT, related_name='invoices', to='clients.client')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who raised the invoice', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_invoices', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Invoice',
                'verbose_name_plural': 'Invoices',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['client', 'status'], name='invoice_client_status_idx'),
                    models.Index(fields=['due_date'], name='invoice_due_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InvoiceItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0, help_text='Display order')),
                ('name', models.CharField(help_text='Item name', max_length=200)),
                ('description', models.TextField(blank=True, help_text='Item description')),
                ('quantity', models.DecimalField(decimal_places=2, default=Decimal('1'), help_text='Quantity billed', max_digits=10)),
                ('unit_price', models.DecimalField(decimal_places=2, help_text='Price per unit', max_digits=12)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='quantity x unit_price (calculated)', max_digits=12)),
                ('invoice', models.ForeignKey(help_text='Parent invoice', on_delete=django.db.models.deletion.CASCADE, related_name='items', to='billing.invoice')),
                ('service', models.ForeignKey(blank=True, help_text='Catalog service this item was copied from', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoice_items', to='billing.serviceitem')),
            ],
            options={
                'verbose_name': 'Invoice Item',
                'verbose_name_plural': 'Invoice Items',
                'ordering': ['position', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, help_text='Payment amount', max_digits=12)),
                ('payment_date', models.DateField(default=django.utils.timezone.localdate, help_text='Date payment received')),
                ('payment_method', models.CharField(choices=[('CASH', 'Cash'), ('BANK_TRANSFER', 'Bank Transfer'), ('UPI', 'UPI'), ('CHEQUE', 'Cheque'), ('OTHER', 'Other')], help_text='Payment method', max_length=20)),
                ('transaction_id', models.CharField(blank=True, help_text='UTR, cheque number, etc.', max_length=100)),
                ('note', models.TextField(blank=True, help_text='Payment note')),
                ('operation_id', models.CharField(blank=True, help_text='Client-supplied idempotency key', max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('invoice', models.ForeignKey(help_text='Invoice being paid', on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='billing.invoice')),
                ('recorded_by', models.ForeignKey(blank=True, help_text='User who recorded this payment', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recorded_payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['payment_date', 'id'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('operation_id', ''), _negated=True), fields=('invoice', 'operation_id'), name='unique_payment_operation_per_invoice'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoricalServiceItem',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('name', models.CharField(help_text='Service name', max_length=200)),
                ('description', models.TextField(blank=True, help_text='Service description')),
                ('base_price', models.DecimalField(decimal_places=2, help_text='Default unit price', max_digits=12)),
                ('category', models.CharField(choices=[('ITR', 'Income Tax Return'), ('GST', 'GST'), ('ACCOUNTING', 'Accounting'), ('OTHER', 'Other')], help_text='Service category', max_length=20)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive services cannot be picked for new invoice items')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Service',
                'verbose_name_plural': 'historical Services',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalInvoice',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('invoice_number', models.CharField(db_index=True, help_text='Invoice number (immutable)', max_length=50)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of item amounts', max_digits=12)),
                ('tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Flat tax amount', max_digits=12)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Subtotal plus tax', max_digits=12)),
                ('paid_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of payments', max_digits=12)),
                ('balance_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Amount still owed (never negative)', max_digits=12)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('PARTIAL', 'Partially Paid'), ('PAID', 'Paid'), ('CANCELLED', 'Cancelled')], default='PENDING', help_text='Invoice status', max_length=20)),
                ('issue_date', models.DateField(default=django.utils.timezone.localdate, help_text='Date invoice was issued')),
                ('due_date', models.DateField(help_text='Payment due date')),
                ('notes', models.TextField(blank=True, help_text='Notes shown on the invoice')),
                ('version', models.PositiveIntegerField(default=1, help_text='Incremented on every change')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('client', models.ForeignKey(blank=True, db_constraint=False, help_text='Client being billed (immutable)', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='clients.client')),
                ('created_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who raised the invoice', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Invoice',
                'verbose_name_plural': 'historical Invoices',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
