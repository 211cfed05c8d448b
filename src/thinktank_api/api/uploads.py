"""Convert multipart ``UploadFile`` parts into in-memory ``FileUpload`` values."""

from fastapi import UploadFile

from thinktank_api.services.upload_service import FileUpload


async def read_upload(file: UploadFile | None) -> FileUpload | None:
    """Read an optional upload. A part with no filename counts as absent."""
    if file is None or not file.filename:
        return None
    content = await file.read()
    return FileUpload(filename=file.filename, content_type=file.content_type, content=content)


async def read_uploads(files: list[UploadFile] | None) -> list[FileUpload]:
    uploads = []
    for file in files or []:
        upload = await read_upload(file)
        if upload is not None:
            uploads.append(upload)
    return uploads
