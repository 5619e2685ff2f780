"""Notion property builders and readers"""

from glass_orders.shared import notion_properties as props


def _page(**properties):
    return {"id": "page-1", "properties": properties}


class TestRichText:
    def test_long_text_is_split_into_2000_character_objects(self):
        value = props.rich_text("x" * 4500)
        chunks = [item["text"]["content"] for item in value["rich_text"]]
        assert [len(chunk) for chunk in chunks] == [2000, 2000, 500]

    def test_empty_or_none_clears_the_property(self):
        assert props.rich_text("") == {"rich_text": []}
        assert props.rich_text(None) == {"rich_text": []}

    def test_read_text_joins_segments(self):
        page = _page(
            Notes={
                "rich_text": [
                    {"plain_text": "first ", "text": {"content": "first "}},
                    {"text": {"content": "second"}},
                ]
            }
        )
        assert props.read_text(page, "Notes") == "first second"

    def test_chunked_text_reads_back_unchanged(self):
        text = "".join(chr(65 + i % 26) for i in range(5000))
        page = _page(Notes=props.rich_text(text))
        assert props.read_text(page, "Notes") == text


class TestReaders:
    def test_missing_properties_use_defaults(self):
        page = _page()
        assert props.read_text(page, "Order ID", "none") == "none"
        assert props.read_select(page, "Status") is None
        assert props.read_relation_ids(page, "Client") == []
        assert props.read_first_relation(page, "Client") is None
        assert props.read_number(page, "Price") is None
        assert props.read_date(page, "Schedule Date") is None
        assert props.read_file_urls(page, "Before Photos") == []

    def test_title_select_relation_number(self):
        page = _page(
            **{
                "Order ID": props.title("ORD-2026-0001"),
                "Status": props.select("Programado"),
                "Client": props.relation("a", "b"),
                "Price": props.number(0),
            }
        )
        assert props.read_text(page, "Order ID") == "ORD-2026-0001"
        assert props.read_select(page, "Status") == "Programado"
        assert props.read_relation_ids(page, "Client") == ["a", "b"]
        assert props.read_first_relation(page, "Client") == "a"
        assert props.read_number(page, "Price") == 0

    def test_file_urls_of_external_and_hosted_files(self):
        page = _page(
            Photos={
                "files": [
                    {"type": "external", "name": "before_1.jpg", "external": {"url": "https://a/1.jpg"}},
                    {"type": "file", "name": "x.jpg", "file": {"url": "https://s3/x.jpg", "expiry_time": "..."}},
                ]
            }
        )
        assert props.read_file_urls(page, "Photos") == ["https://a/1.jpg", "https://s3/x.jpg"]

    def test_external_files_pairs_urls_with_names(self):
        value = props.external_files(["https://a/1.jpg", "https://a/2.jpg"], ["before_1.jpg", "before_2.jpg"])
        assert [f["name"] for f in value["files"]] == ["before_1.jpg", "before_2.jpg"]
        assert value["files"][1]["external"]["url"] == "https://a/2.jpg"

    def test_phone_from_phone_number_or_text(self):
        assert props.read_phone(_page(Phone={"phone_number": "+52 1"}), "Phone") == "+52 1"
        assert props.read_phone(_page(Phone=props.rich_text("+52 2")), "Phone") == "+52 2"
