from django.urls import path

from server.apps.drive import views

app_name = 'drive'

urlpatterns = [
    path('drive', views.drive, name='root'),
    path('drive/<str:folder_id>', views.drive, name='folder'),
    path('add-folder', views.add_folder, name='add_folder'),
    path('upload', views.upload, name='upload'),
    path('add-file', views.add_file, name='add_file'),
    path('file/<str:file_id>', views.file_detail, name='file_detail'),
    path('file/<str:file_id>/download', views.download, name='download'),
    path('file/<str:file_id>/delete', views.remove_file, name='delete_file'),
    path(
        'folder/<str:folder_id>/delete',
        views.remove_folder,
        name='delete_folder',
    ),
    path('debug/files', views.debug_files, name='debug_files'),
]
