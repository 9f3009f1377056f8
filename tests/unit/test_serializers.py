"""Tests for JSON and XML snapshot rendering."""

import json

from hostsnap.core.models import CpuInfo, LibraryInfo, NetworkInfo, OsInfo, Snapshot, ToolInfo
from hostsnap.serializers import to_dict, to_json, to_xml, xml_escape


def leaf(name: str, value: str) -> str:
    inner = f"<string>{value}</string>" if value else "<string/>"
    return f"<member><name>{name}</name><value>{inner}</value></member>"


class TestToJson:
    """Tests for the JSON rendering."""

    def test_top_level_key_order(self, sample_snapshot: Snapshot) -> None:
        decoded = json.loads(to_json(sample_snapshot))

        assert list(decoded) == ["OS", "CPU", "Network", "Tools", "Libraries"]
        assert list(decoded["OS"]) == ["Name", "Version"]
        assert list(decoded["CPU"]) == ["Model", "Arch"]
        assert list(decoded["Network"]) == ["PublicIP", "PrivateIP"]
        assert list(decoded["Tools"][0]) == ["Name", "Version", "Path"]
        assert list(decoded["Libraries"][0]) == ["Name", "Version"]

    def test_decoded_values_match_snapshot(self, sample_snapshot: Snapshot) -> None:
        decoded = json.loads(to_json(sample_snapshot))

        assert decoded == {
            "OS": {"Name": "Linux", "Version": "12"},
            "CPU": {"Model": "Generic CPU", "Arch": "x86_64"},
            "Network": {"PublicIP": "203.0.113.5", "PrivateIP": "192.168.1.10"},
            "Tools": [{"Name": "Python", "Version": "3.12.3", "Path": "/usr/bin/python3"}],
            "Libraries": [{"Name": "LibXML2", "Version": "2.12.6"}],
        }

    def test_list_order_preserved(self) -> None:
        snapshot = Snapshot(
            tools=(ToolInfo("Python"), ToolInfo("7-Zip"), ToolInfo("UnRAR")),
            libraries=(LibraryInfo("Expat", "2.6.2"), LibraryInfo("OpenSSL", "3.0.13")),
        )

        decoded = json.loads(to_json(snapshot))

        assert [tool["Name"] for tool in decoded["Tools"]] == ["Python", "7-Zip", "UnRAR"]
        assert [lib["Name"] for lib in decoded["Libraries"]] == ["Expat", "OpenSSL"]

    def test_single_line(self, sample_snapshot: Snapshot) -> None:
        assert "\n" not in to_json(sample_snapshot)

    def test_escapes_quotes_backslashes_and_control_characters(self) -> None:
        snapshot = Snapshot(os=OsInfo(name='Win "Pro"\\x', version="1\n2"))

        rendered = to_json(snapshot)

        assert '"Name":"Win \\"Pro\\"\\\\x"' in rendered
        assert '"Version":"1\\n2"' in rendered
        assert json.loads(rendered)["OS"]["Version"] == "1\n2"

    def test_empty_snapshot(self) -> None:
        assert json.loads(to_json(Snapshot())) == {
            "OS": {"Name": "", "Version": ""},
            "CPU": {"Model": "", "Arch": ""},
            "Network": {"PublicIP": "", "PrivateIP": ""},
            "Tools": [],
            "Libraries": [],
        }


class TestToXml:
    """Tests for the XML-RPC style struct rendering."""

    def test_end_to_end_document(self, sample_snapshot: Snapshot) -> None:
        expected = (
            "<value><struct>"
            "<OS>" + leaf("Name", "Linux") + leaf("Version", "12") + "</OS>"
            "<CPU>" + leaf("Model", "Generic CPU") + leaf("Arch", "x86_64") + "</CPU>"
            "<Network>"
            + leaf("PublicIP", "203.0.113.5")
            + leaf("PrivateIP", "192.168.1.10")
            + "</Network>"
            "<Tools>"
            + leaf("Name", "Python")
            + leaf("Version", "3.12.3")
            + leaf("Path", "/usr/bin/python3")
            + "</Tools>"
            "<Libraries>" + leaf("Name", "LibXML2") + leaf("Version", "2.12.6") + "</Libraries>"
            "</struct></value>"
        )

        assert to_xml(sample_snapshot) == expected

    def test_group_order(self, sample_snapshot: Snapshot) -> None:
        rendered = to_xml(sample_snapshot)

        groups = ("OS", "CPU", "Network", "Tools", "Libraries")
        positions = [rendered.index(f"<{group}>") for group in groups]

        assert positions == sorted(positions)

    def test_empty_value_is_self_closing(self) -> None:
        snapshot = Snapshot(os=OsInfo(name="Linux", version=""))

        rendered = to_xml(snapshot)

        assert leaf("Version", "") in rendered
        assert "<value><string/></value>" in rendered
        assert "<string></string>" not in rendered

    def test_empty_snapshot(self) -> None:
        rendered = to_xml(Snapshot())

        assert rendered.count("<string/>") == 6
        assert "<Tools></Tools><Libraries></Libraries>" in rendered

    def test_markup_is_escaped(self) -> None:
        snapshot = Snapshot(cpu=CpuInfo(model="A&B <x> \"q\" 'a'", arch="arm64"))

        rendered = to_xml(snapshot)

        assert "<string>A&amp;B &lt;x&gt; &quot;q&quot; &apos;a&apos;</string>" in rendered

    def test_single_line(self, sample_snapshot: Snapshot) -> None:
        assert "\n" not in to_xml(sample_snapshot)


class TestXmlEscape:
    def test_control_characters_become_references(self) -> None:
        assert xml_escape("a\x01b\x1fc") == "a&#1;b&#31;c"

    def test_line_breaks_and_tabs_become_references(self) -> None:
        assert xml_escape("a\tb\nc\rd") == "a&#9;b&#10;c&#13;d"

    def test_multiline_value_stays_on_one_line(self) -> None:
        rendered = to_xml(Snapshot(os=OsInfo("Linux\nEmbedded", "12")))

        assert "\n" not in rendered
        assert "<string>Linux&#10;Embedded</string>" in rendered

    def test_plain_text_unchanged(self) -> None:
        assert xml_escape("Intel(R) Core(TM) i7") == "Intel(R) Core(TM) i7"


class TestDeterminism:
    """Rendering is pure."""

    def test_repeated_rendering_is_identical(self, sample_snapshot: Snapshot) -> None:
        assert to_json(sample_snapshot) == to_json(sample_snapshot)
        assert to_xml(sample_snapshot) == to_xml(sample_snapshot)

    def test_to_dict_does_not_share_state(self, sample_snapshot: Snapshot) -> None:
        first = to_dict(sample_snapshot)
        first["Tools"].clear()

        assert len(to_dict(sample_snapshot)["Tools"]) == 1

    def test_equal_snapshots_render_equal(self) -> None:
        a = Snapshot(network=NetworkInfo("198.51.100.1", "10.0.0.2"))
        b = Snapshot(network=NetworkInfo("198.51.100.1", "10.0.0.2"))

        assert to_xml(a) == to_xml(b)
