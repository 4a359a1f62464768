"""
Example: Issuing and checking signed download links

Shows the three outcomes a download endpoint has to tell apart:
expired, already used, and invalid.

Prerequisites:
    pip install -e .

Run:
    python download_links_example.py
"""

import json

from signeduri import (
    ExpiredUri,
    InvalidSignature,
    UriAlreadyUsed,
    sign,
    verify,
)

SECRET = "change-me"

# Per-file download counter; bumping it consumes every outstanding link
download_counts = {"report.pdf": 0}


def issue_link(filename):
    """Create a one-hour, single-use link for a file."""
    token = str(download_counts[filename])
    return str(
        sign(f"https://files.example.com/download?file={filename}", SECRET)
        .expires("+1 hour")
        .single_use(token)
    )


def handle_download(url, filename):
    """Verify an incoming link the way a request handler would."""
    try:
        link = verify(url, SECRET, str(download_counts[filename]))
    except ExpiredUri as e:
        return 410, e.to_dict()
    except UriAlreadyUsed as e:
        return 409, e.to_dict()
    except InvalidSignature as e:
        return 403, e.to_dict()

    download_counts[filename] += 1
    return 200, {"file": filename, "expires_at": link.expires_at().isoformat()}


def main():
    url = issue_link("report.pdf")
    print(f"Issued: {url}")

    status, body = handle_download(url, "report.pdf")
    print(f"\nFirst download: {status} {json.dumps(body)}")

    status, body = handle_download(url, "report.pdf")
    print(f"Second download: {status} {json.dumps(body)}")

    tampered = url.replace("report.pdf", "secrets.pdf")
    status, body = handle_download(tampered, "report.pdf")
    print(f"Tampered link: {status} {json.dumps(body)}")

    expired = str(sign("https://files.example.com/download?file=report.pdf", SECRET).expires(-1))
    status, body = handle_download(expired, "report.pdf")
    print(f"Expired link: {status} {json.dumps(body)}")


if __name__ == "__main__":
    main()
