# apps/clients/migrations/0001_initial.py
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Client',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Client display name', max_length=255)),
                ('email', models.EmailField(help_text='Primary contact email (unique)', max_length=254, unique=True)),
                ('phone', models.CharField(help_text='Primary contact phone', max_length=30)),
                ('pan_number', models.CharField(blank=True, help_text='PAN (stored upper-case)', max_length=20)),
                ('gst_number', models.CharField(blank=True, help_text='GSTIN (stored upper-case)', max_length=20)),
                ('physical_file_number', models.CharField(blank=True, help_text='Office file number', max_length=50)),
                ('rack_location', models.CharField(blank=True, help_text='Where the physical file is kept', max_length=100)),
            ],
            options={
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['name'], name='client_name_idx'),
                    models.Index(fields=['phone'], name='client_phone_idx'),
                ],
            },
        ),
    ]
