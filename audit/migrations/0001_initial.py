import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('user_register', 'User register'), ('user_login', 'User login'), ('user_logout', 'User logout'), ('password_reset_request', 'Password reset request'), ('password_reset_complete', 'Password reset complete'), ('profile_update', 'Profile update'), ('profile_image_upload', 'Profile image upload'), ('account_delete', 'Account delete'), ('tryon_request', 'Try-on request'), ('tryon_complete', 'Try-on complete'), ('tryon_failed', 'Try-on failed'), ('garment_create', 'Garment create'), ('garment_update', 'Garment update'), ('garment_delete', 'Garment delete'), ('user_block', 'User block'), ('user_unblock', 'User unblock'), ('admin_action', 'Admin action')], max_length=40)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=512, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['action', '-created_at'], name='audit_audit_action_3f0c2b_idx'),
                    models.Index(fields=['user', '-created_at'], name='audit_audit_user_id_8d41e6_idx'),
                ],
            },
        ),
    ]
