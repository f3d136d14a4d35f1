import json

from src.core.config.settings import settings


def text_file(name="a.txt", content=b"hello", mime="text/plain"):
    return ("files", (name, content, mime))


def test_upload_without_files(client, gemini, api_headers):
    response = client.post("/api/stores/s1/upload", headers=api_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "파일이 없습니다"}


def test_upload_too_many_files(client, gemini, api_headers):
    files = [text_file(f"f{i}.txt") for i in range(settings.MAX_UPLOAD_FILES + 1)]

    response = client.post("/api/stores/s1/upload", files=files, headers=api_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "최대 10개의 파일만 업로드 가능합니다"
    gemini.upload_document.assert_not_called()


def test_upload_success(client, gemini, api_headers):
    metadata = [
        {"key": "author", "value": "kim", "type": "string"},
        {"key": "year", "value": "2024", "type": "number"},
        {"key": "tags", "value": "a, b,,c", "type": "stringList"},
    ]

    response = client.post(
        "/api/stores/s1/upload",
        files=[text_file("a.txt"), text_file("b.md", b"# b", "application/octet-stream")],
        data={"customMetadata": json.dumps(metadata)},
        headers=api_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "2개 파일이 성공적으로 업로드되었습니다"
    assert body["data"]["successCount"] == 2
    assert body["data"]["failCount"] == 0
    assert body["data"]["results"][0] == {"fileName": "a.txt", "success": True, "error": None}

    first, second = gemini.upload_document.call_args_list
    store, stream, options = first.args
    assert store.full_name == "fileSearchStores/s1"
    assert stream.read() == b"hello"
    assert options.display_name == "a.txt"
    assert options.mime_type == "text/plain"
    assert options.custom_metadata == [
        {"key": "author", "string_value": "kim"},
        {"key": "year", "numeric_value": 2024.0},
        {"key": "tags", "string_list_value": {"values": ["a", "b", "c"]}},
    ]
    # Generic content types fall back to the extension table.
    assert second.args[2].mime_type == "text/markdown"


def test_upload_partial_failure(client, gemini, api_headers):
    gemini.upload_document.side_effect = [None, RuntimeError("indexing failed")]

    response = client.post(
        "/api/stores/s1/upload",
        files=[text_file("ok.txt"), text_file("bad.txt")],
        headers=api_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "1개 파일 업로드 실패:\n\n• bad.txt: indexing failed"
    assert body["data"]["successCount"] == 1
    assert body["data"]["failCount"] == 1


def test_upload_oversize_file_is_reported(client, gemini, api_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE_MB", 0)

    response = client.post(
        "/api/stores/s1/upload", files=[text_file("big.txt")], headers=api_headers
    )

    assert response.status_code == 400
    result = response.json()["data"]["results"][0]
    assert result["success"] is False
    assert result["error"] == "파일 크기가 0MB를 초과합니다"
    gemini.upload_document.assert_not_called()


def test_upload_ignores_malformed_metadata(client, gemini, api_headers):
    response = client.post(
        "/api/stores/s1/upload",
        files=[text_file()],
        data={"customMetadata": "{not json"},
        headers=api_headers,
    )

    assert response.status_code == 200
    assert gemini.upload_document.call_args.args[2].custom_metadata is None
