import re

import httpx

PDF_BYTES = b"%PDF-1.4 minimal test document"


def form_parts(request: httpx.Request) -> dict:
    """Split a multipart request body into {name: (filename, value)}."""
    boundary = request.headers["content-type"].split("boundary=")[1].encode()
    parts = {}
    for chunk in request.content.split(b"--" + boundary):
        chunk = chunk.strip(b"\r\n")
        if not chunk or chunk == b"--":
            continue
        head, _, value = chunk.partition(b"\r\n\r\n")
        disposition = head.split(b"\r\n")[0].decode()
        name = re.search(r'\bname="([^"]*)"', disposition).group(1)
        filename = re.search(r'\bfilename="([^"]*)"', disposition)
        parts[name] = (filename.group(1) if filename else None, value)
    return parts
