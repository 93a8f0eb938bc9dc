import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('garments', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TryonRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('input_image_url', models.URLField(max_length=500)),
                ('output_image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('failed', 'Failed')], default='processing', max_length=20)),
                ('processing_time', models.PositiveIntegerField(blank=True, help_text='Milliseconds', null=True)),
                ('error_message', models.TextField(blank=True, null=True)),
                ('idempotency_key', models.CharField(blank=True, max_length=128, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('garment', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tryon_requests', to='garments.garment')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tryon_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', '-created_at'], name='tryon_tryon_user_id_5c2e7a_idx'),
                    models.Index(fields=['status'], name='tryon_tryon_status_b71d04_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(models.Q(('output_image_url__isnull', False), ('status', 'completed')), models.Q(models.Q(('status', 'completed'), _negated=True), ('output_image_url__isnull', True)), _connector='OR'), name='tryon_output_iff_completed'),
                    models.CheckConstraint(condition=models.Q(models.Q(('error_message__isnull', False), ('status', 'failed')), models.Q(models.Q(('status', 'failed'), _negated=True), ('error_message__isnull', True)), _connector='OR'), name='tryon_error_iff_failed'),
                    models.UniqueConstraint(condition=models.Q(('idempotency_key__isnull', False)), fields=('user', 'idempotency_key'), name='tryon_unique_idempotency_key'),
                ],
            },
        ),
    ]
