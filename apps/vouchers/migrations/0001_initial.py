# Generated manually for the vouchers app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        ('products', '0001_initial'),
        ('stores', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Voucher',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('code', models.CharField(max_length=32, unique=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('redeemed', 'Redeemed'), ('expired', 'Expired')], default='active', max_length=20)),
                ('is_redeemed', models.BooleanField(default=False)),
                ('redeemed_at', models.DateTimeField(blank=True, null=True)),
                ('expiration_date', models.DateTimeField()),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.01'))])),
                ('sender_name', models.CharField(max_length=100)),
                ('sender_email', models.EmailField(max_length=255)),
                ('receiver_name', models.CharField(max_length=100)),
                ('receiver_email', models.EmailField(max_length=255)),
                ('message', models.TextField(max_length=500)),
                ('template', models.CharField(choices=[('template1', 'Template 1'), ('template2', 'Template 2'), ('template3', 'Template 3'), ('template4', 'Template 4'), ('template5', 'Template 5'), ('birthday', 'Birthday'), ('christmas', 'Christmas'), ('valentine', 'Valentine'), ('general', 'General')], default='template1', max_length=20)),
                ('qr_code', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='voucher', to='orders.order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vouchers', to='products.product')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vouchers', to='stores.store')),
            ],
            options={
                'db_table': 'vouchers',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'expiration_date'], name='vouchers_status_exp_idx'),
                    models.Index(fields=['store', 'status'], name='vouchers_store_status_idx'),
                ],
            },
        ),
    ]
