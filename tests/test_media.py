import io

from PIL import Image


def test_upload_and_delete_product_image(client, png_bytes, app):
    res = client.post("/api/upload-product-image", files={"file": ("frame.png", png_bytes, "image/png")})

    assert res.status_code == 200
    body = res.json()
    assert body["path"].endswith(".png")
    assert body["url"].endswith(f"/media/product-images/{body['path']}")
    assert (app.state.bucket.root / body["path"]).exists()

    served = client.get(f"/media/product-images/{body['path']}")
    assert served.status_code == 200
    assert served.content == png_bytes

    res = client.post("/api/delete-product-image", json={"fileName": body["path"]})
    assert res.json() == {"success": True}
    assert not (app.state.bucket.root / body["path"]).exists()


def test_upload_requires_file(client):
    res = client.post("/api/upload-product-image", data={"other": "x"})

    assert res.status_code == 400
    assert res.json() == {"error": "لم يتم رفع أي ملف"}


def test_upload_rejects_non_image_type(client):
    res = client.post("/api/upload-product-image", files={"file": ("a.txt", b"hello", "text/plain")})

    assert res.status_code == 400


def test_upload_rejects_fake_image(client):
    res = client.post("/api/upload-product-image", files={"file": ("a.png", b"not really", "image/png")})

    assert res.status_code == 400


def test_upload_rejects_large_file(client, app, png_bytes):
    app.state.max_image_bytes = 10

    res = client.post("/api/upload-product-image", files={"file": ("big.png", png_bytes, "image/png")})

    assert res.status_code == 400


def test_delete_requires_name(client):
    res = client.post("/api/delete-product-image", json={})

    assert res.status_code == 400
    assert res.json() == {"error": "لم يتم تحديد اسم الملف"}


def test_delete_rejects_path_escape(client):
    res = client.post("/api/delete-product-image", json={"fileName": "../store.db"})

    assert res.status_code == 500
    assert res.json() == {"error": "تعذر حذف الصورة"}


def test_generate_tryon_is_retired(client):
    res = client.post("/api/generate-tryon", json={"image": "x"})

    assert res.status_code == 200
    assert res.json()["status"] == "deprecated"


def test_malformed_json_is_400(client):
    res = client.post("/api/admin/slider", content=b"{not json", headers={"content-type": "application/json"})

    assert res.status_code == 400
    assert res.json() == {"error": "بيانات غير صالحة"}


def test_stored_extension_follows_image_content(client):
    buf = io.BytesIO()
    Image.new("RGB", (2, 2), (0, 0, 255)).save(buf, format="GIF")
    raw = buf.getvalue() + b"<script>alert(1)</script>"

    res = client.post("/api/upload-product-image", files={"file": ("x.html", raw, "image/gif")})

    assert res.status_code == 200
    path = res.json()["path"]
    assert path.endswith(".gif")
    served = client.get(f"/media/product-images/{path}")
    assert served.headers["content-type"].startswith("image/")
