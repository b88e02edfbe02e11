"""HTTP views of the drive.

Views read the principal from the session and pass its ID explicitly
to the logic layer. Drive errors are turned into responses by
``DriveErrorMiddleware``.
"""

from django.contrib.auth.decorators import login_required
from django.http import (
    FileResponse,
    HttpRequest,
    HttpResponse,
    HttpResponseBadRequest,
    HttpResponseRedirect,
    JsonResponse,
)
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from server.apps.drive.exceptions import InvalidInputError
from server.apps.drive.infrastructure.locators import RedirectDownload
from server.apps.drive.logic.drive_view import compose_view
from server.apps.drive.logic.file_operations import (
    create_file,
    create_placeholder_file,
    delete_file,
    download_target,
    get_file,
    list_user_files,
)
from server.apps.drive.logic.folder_operations import (
    create_folder,
    delete_folder,
)

_UPLOAD_FIELD = 'user-file'


def _parse_id(raw_id: str, label: str) -> int:
    """Parse an identifier taken from the URL or a form.

    Raises:
        InvalidInputError: If the value is not a positive integer.
    """
    try:
        parsed = int(raw_id)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f'Invalid {label} ID') from exc
    if parsed < 1:
        raise InvalidInputError(f'Invalid {label} ID')
    return parsed


def _optional_id(raw_id: str | None, label: str) -> int | None:
    if raw_id is None or not raw_id.strip():
        return None
    return _parse_id(raw_id.strip(), label)


def _redirect_to_folder(folder_id: int | None) -> HttpResponseRedirect:
    if folder_id is None:
        return redirect('drive:root')
    return redirect('drive:folder', folder_id=folder_id)


@login_required
@require_GET
def drive(request: HttpRequest, folder_id: str | None = None) -> HttpResponse:
    """Render the root of the drive or one folder."""
    parsed_id = None if folder_id is None else _parse_id(folder_id, 'folder')
    view = compose_view(request.user.id, parsed_id)
    return render(request, 'drive/drive.html', {
        'view': view,
        'current_folder': view.folder,
        'folders': view.subfolders,
        'files': view.files,
    })


@login_required
@require_POST
def add_folder(request: HttpRequest) -> HttpResponse:
    """Create a folder at the root or inside ``parentId``."""
    parent_id = _optional_id(request.POST.get('parentId'), 'parent folder')
    create_folder(
        request.user.id,
        request.POST.get('folderName', ''),
        parent_id,
    )
    return _redirect_to_folder(parent_id)


@login_required
@require_POST
def upload(request: HttpRequest) -> HttpResponse:
    """Store an uploaded file in the root or inside ``folderId``."""
    uploaded = request.FILES.get(_UPLOAD_FIELD)
    if uploaded is None:
        return HttpResponseBadRequest('No file uploaded')

    folder_id = _optional_id(request.POST.get('folderId'), 'folder')
    create_file(request.user.id, folder_id, uploaded)
    return _redirect_to_folder(folder_id)


@login_required
@require_POST
def add_file(request: HttpRequest) -> HttpResponse:
    """Create a placeholder file record without content."""
    folder_id = _optional_id(request.POST.get('folderId'), 'folder')
    create_placeholder_file(
        request.user.id,
        request.POST.get('fileName', ''),
        folder_id,
    )
    return _redirect_to_folder(folder_id)


@login_required
@require_GET
def file_detail(request: HttpRequest, file_id: str) -> HttpResponse:
    """Render the details of one file."""
    file_instance = get_file(request.user.id, _parse_id(file_id, 'file'))
    return render(request, 'drive/file_detail.html', {'file': file_instance})


@login_required
@require_GET
def download(request: HttpRequest, file_id: str) -> HttpResponse:
    """Send the file bytes or redirect to the blob store."""
    instruction = download_target(request.user.id, _parse_id(file_id, 'file'))
    if isinstance(instruction, RedirectDownload):
        return redirect(instruction.url)
    return FileResponse(
        open(instruction.path, 'rb'),  # noqa: WPS515, SIM115
        as_attachment=True,
        filename=instruction.filename,
        content_type=instruction.mime_type,
    )


@login_required
@require_POST
def remove_file(request: HttpRequest, file_id: str) -> HttpResponse:
    """Delete a file and go back to the folder it was in."""
    deleted = delete_file(request.user.id, _parse_id(file_id, 'file'))
    return _redirect_to_folder(deleted.folder_id)


@login_required
@require_POST
def remove_folder(request: HttpRequest, folder_id: str) -> HttpResponse:
    """Delete a folder with its contents and go back to its parent."""
    deleted = delete_folder(request.user.id, _parse_id(folder_id, 'folder'))
    return _redirect_to_folder(deleted.parent_id)


@login_required
@require_GET
def debug_files(request: HttpRequest) -> JsonResponse:
    """List every file of the user as JSON."""
    files = [
        {
            'id': file_instance.id,
            'name': file_instance.name,
            'folderId': file_instance.folder_id,
            'storageKind': file_instance.storage_kind,
            'path': file_instance.local_path,
            'cloudUrl': file_instance.remote_url,
            'createdAt': file_instance.created_at.isoformat(),
        }
        for file_instance in list_user_files(request.user.id)
    ]
    return JsonResponse({'totalFiles': len(files), 'files': files})
