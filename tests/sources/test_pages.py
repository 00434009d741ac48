import requests

from Jellyfin_Source.sources.jellyfin import item_id_from_ref


DOWNLOAD = "http://jf.local:8096/Items/c1/Download?api_key=KEY"


def test_item_id_from_ref():
    assert item_id_from_ref("/Items/abc") == "abc"
    assert item_id_from_ref("/Items/abc/Download") == "abc"
    assert item_id_from_ref("/Items/abc/Download?x=1") == "abc"
    assert item_id_from_ref("abc") == "abc"


def test_non_comic_is_single_download(source, server, logged_in):
    server.add("GET", "/Items/c1", payload={"Id": "c1", "Name": "novel.epub", "Type": "Book"})

    pages = source.pages("/Items/c1/Download")

    assert [(p.index, p.image_url) for p in pages] == [(0, DOWNLOAD)]
    assert server.paths() == ["/Items/c1"]


def test_attachments_filtered_to_images_in_index_order(source, server, logged_in):
    server.add("GET", "/Items/c1", payload={"Id": "c1", "Name": "issue 1.cbz", "Type": "Book"})
    server.add("GET", "/Items/c1/Attachments", payload=[
        {"Index": 4, "Filename": "p3.PNG"},
        {"Index": 0, "Filename": "ComicInfo.xml"},
        {"Index": 2, "Filename": "p2.jpg"},
        {"Index": 3, "Filename": "readme.txt"},
        {"Index": 1, "Filename": "p1.jpeg"},
    ])

    pages = source.pages("/Items/c1/Download")

    assert [p.index for p in pages] == [0, 1, 2]
    assert [p.image_url for p in pages] == [
        "http://jf.local:8096/Items/c1/Attachments/1?api_key=KEY",
        "http://jf.local:8096/Items/c1/Attachments/2?api_key=KEY",
        "http://jf.local:8096/Items/c1/Attachments/4?api_key=KEY",
    ]
    assert server.paths("HEAD") == []


def test_probe_stops_at_first_missing_index(source, server, logged_in):
    server.add("GET", "/Items/c1", payload={"Id": "c1", "Name": "issue.cbr"})
    server.add("GET", "/Items/c1/Attachments", payload=[])
    for index in range(3):
        server.add("HEAD", f"/Items/c1/Images/Page/{index}")
    # gaps are not skipped
    server.add("HEAD", "/Items/c1/Images/Page/4")

    pages = source.pages("/Items/c1/Download")

    assert [p.index for p in pages] == [0, 1, 2]
    assert pages[2].image_url == "http://jf.local:8096/Items/c1/Images/Page/2?api_key=KEY"
    assert server.paths("HEAD") == [f"/Items/c1/Images/Page/{i}" for i in range(4)]


def test_probe_is_bounded(config, store, server, logged_in):
    from Jellyfin_Source.sources.jellyfin import JellyfinSource

    config["pages"]["probe_limit"] = 5
    src = JellyfinSource(config, store=store)
    src.request._get = server.get
    src.request._head = server.head
    server.add("GET", "/Items/c1", payload={"Id": "c1", "Name": "x.cbz"})
    for index in range(10):
        server.add("HEAD", f"/Items/c1/Images/Page/{index}")

    assert len(src.pages("/Items/c1")) == 5
    assert len(server.paths("HEAD")) == 5


def test_probe_transport_error_ends_sequence(source, server, logged_in):
    server.add("GET", "/Items/c1", payload={"Id": "c1", "Name": "x.cbz"})
    server.add("HEAD", "/Items/c1/Images/Page/0")
    server.add("HEAD", "/Items/c1/Images/Page/1", error=requests.exceptions.ConnectionError("reset"))

    assert len(source.pages("/Items/c1")) == 1


def test_comic_without_pages_falls_back_to_download(source, server, logged_in):
    server.add("GET", "/Items/c1", payload={"Id": "c1", "Name": "Strip", "Type": "ComicBook"})
    server.add("GET", "/Items/c1/Attachments", payload=[{"Index": 0, "Filename": "ComicInfo.xml"}])

    pages = source.pages("/Items/c1")

    assert [(p.index, p.image_url) for p in pages] == [(0, DOWNLOAD)]
    assert server.paths("HEAD") == ["/Items/c1/Images/Page/0"]


def test_item_fetch_failure_falls_back_to_download(source, server, logged_in):
    server.add("GET", "/Items/c1", status=404)

    pages = source.pages("/Items/c1/Download")

    assert [(p.index, p.image_url) for p in pages] == [(0, DOWNLOAD)]


def test_image_url_is_page_url(source, server, logged_in):
    server.add("GET", "/Items/c1", payload={"Id": "c1", "Name": "novel.pdf"})

    page = source.pages("/Items/c1")[0]

    assert source.image_url(page) == DOWNLOAD
