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
            name='Folder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='drive.folder')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='folders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Folder',
                'verbose_name_plural': 'Folders',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['user', 'parent'], name='folders_user_parent_idx')],
            },
        ),
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Display name, usually the uploaded filename', max_length=255)),
                ('size_bytes', models.BigIntegerField(default=0, help_text='File size in bytes')),
                ('mime_type', models.CharField(default='application/octet-stream', max_length=255)),
                ('storage_kind', models.CharField(choices=[('local', 'Local disk'), ('remote', 'Remote blob store'), ('none', 'Placeholder')], max_length=16)),
                ('local_path', models.CharField(blank=True, default='', help_text='Path relative to the uploads root: {user_id}/name', max_length=512)),
                ('remote_url', models.URLField(blank=True, default='', max_length=2048)),
                ('remote_id', models.CharField(blank=True, default='', help_text='Object key in the remote blob store', max_length=512)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('folder', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='files', to='drive.folder')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['user', 'folder'], name='files_user_folder_idx')],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ('remote_id', ''),
                                ('remote_url', ''),
                                ('storage_kind', 'local'),
                                models.Q(('local_path', ''), _negated=True),
                            ),
                            models.Q(
                                ('local_path', ''),
                                ('storage_kind', 'remote'),
                                models.Q(('remote_url', ''), _negated=True),
                                models.Q(('remote_id', ''), _negated=True),
                            ),
                            models.Q(
                                ('local_path', ''),
                                ('remote_id', ''),
                                ('remote_url', ''),
                                ('storage_kind', 'none'),
                            ),
                            _connector='OR',
                        ),
                        name='files_storage_locator_consistent',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(('size_bytes__gte', 0)),
                        name='files_size_bytes_non_negative',
                    ),
                ],
            },
        ),
    ]
