from causeconnect.schemas.base import CamelModel


class UploadResponse(CamelModel):
    url: str
    path: str
    bucket: str
    size: int
    type: str
    name: str
