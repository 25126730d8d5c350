from src.agent.dom import SnapshotDom
from src.agent.dom_scanner import NodeFilter, scan_interactive_elements, walk_elements
from src.agent.page_snapshot import parse_html, snapshot_from_capture

PAGE = """
<html>
<head><title>Shop</title><script>var x = "<button>";</script></head>
<body>
<div id="main">
  <form>
    <input name="a">
    <input name="b" class=" big  field ">
    <select name="sizes" multiple></select>
  </form>
  <a href="/home">Home <span>page</span><span style="display:none">secret</span></a>
</div>
<p><a href="/x">X</a></p>
</body>
</html>
"""


def _nodes(snapshot, tag):
    return [node for node in snapshot.document.iter_descendants() if node.tag_name == tag]


def test_parse_html_roots_at_body_by_default():
    snapshot = parse_html(PAGE)

    assert snapshot.root.tag_name == "BODY"
    assert snapshot.document.tag_name == "HTML"
    assert snapshot.root.parent is snapshot.document


def test_parse_html_root_selector():
    snapshot = parse_html(PAGE, root_selector="form")

    assert snapshot.root.tag_name == "FORM"
    assert parse_html(PAGE, root_selector="#missing") is None


def test_parse_html_fragment_gets_document_element():
    snapshot = parse_html("<button>Go</button>")
    dom = SnapshotDom(snapshot)
    (button,) = _nodes(snapshot, "BUTTON")

    assert snapshot.root is snapshot.document
    assert dom.get_xpath(button) == "/html[1]/button[1]"


def test_visibility_heuristics():
    snapshot = parse_html(
        "<html><body>"
        '<div style="color: red; display: none !important">a</div>'
        "<p hidden>b</p>"
        '<input type="hidden" name="csrf">'
        '<span style="display:block">c</span>'
        "</body></html>"
    )
    dom = SnapshotDom(snapshot)

    assert [dom.is_visible(node) for node in snapshot.root.children] == [False, False, False, True]
    assert dom.is_visible(snapshot.document.children[0]) is True


def test_head_content_is_not_rendered():
    snapshot = parse_html(PAGE)
    (head,) = _nodes(snapshot, "HEAD")

    assert head.visible is False


def test_tag_index_is_document_wide_and_one_based():
    snapshot = parse_html(PAGE)
    dom = SnapshotDom(snapshot)
    inputs = _nodes(snapshot, "INPUT")
    links = _nodes(snapshot, "A")

    assert [dom.get_tag_index(node) for node in inputs] == [1, 2]
    assert [dom.get_tag_index(node) for node in links] == [1, 2]


def test_css_selector_anchors_at_closest_id():
    snapshot = parse_html(PAGE)
    dom = SnapshotDom(snapshot)
    first, second = _nodes(snapshot, "INPUT")
    home, x_link = _nodes(snapshot, "A")

    assert dom.get_css_selector(second) == "#main > form > input:nth-of-type(2)"
    assert dom.get_css_selector(first) == "#main > form > input:nth-of-type(1)"
    assert dom.get_css_selector(home) == "#main > a"
    assert dom.get_css_selector(x_link) == "html > body > p > a"
    assert dom.get_css_selector(_nodes(snapshot, "DIV")[0]) == "#main"


def test_xpath_is_absolute_and_indexed():
    snapshot = parse_html(PAGE)
    dom = SnapshotDom(snapshot)
    _, second = _nodes(snapshot, "INPUT")

    assert dom.get_xpath(second) == "/html[1]/body[1]/div[1]/form[1]/input[2]"


def test_text_queries():
    snapshot = parse_html(PAGE)
    dom = SnapshotDom(snapshot)
    _, second = _nodes(snapshot, "INPUT")
    home, _ = _nodes(snapshot, "A")

    assert dom.get_class_name(second) == "big field"
    assert dom.get_link_text(home) == "Home page"
    assert dom.get_text_content(home) == "Home page"
    assert dom.get_link_text(second) == ""
    assert dom.get_name(second) == "b"
    assert dom.get_id(second) == ""


def test_tag_types():
    snapshot = parse_html(
        "<html><body>"
        '<a href="#">a</a><button>b</button><input type="submit"><input type="Checkbox"><input>'
        "<select></select><select multiple></select><textarea></textarea>"
        "</body></html>"
    )
    dom = SnapshotDom(snapshot)

    assert [dom.get_tag_type(node) for node in snapshot.root.children] == [
        "link",
        "button",
        "button",
        "checkbox",
        "text",
        "select",
        "multiselect",
        "textarea",
    ]


def test_label_lookup_prefers_for_attribute():
    snapshot = parse_html(
        "<html><body>"
        '<label>Outer <input id="x"></label>'
        '<label for="x">Explicit</label>'
        "</body></html>"
    )
    dom = SnapshotDom(snapshot)
    (field,) = _nodes(snapshot, "INPUT")

    assert dom.get_text_content(dom.get_label(field)) == "Explicit"


def test_walk_elements_skip_versus_reject():
    snapshot = parse_html(
        "<html><body><div class='skip'><a>1</a></div><div class='reject'><a>2</a></div><a>3</a></body></html>"
    )

    def accept(node):
        css_class = node.attributes.get("class")
        if css_class == "skip":
            return NodeFilter.SKIP
        if css_class == "reject":
            return NodeFilter.REJECT
        return NodeFilter.ACCEPT

    walked = list(walk_elements(snapshot.root, accept))

    assert [node.tag_name for node in walked] == ["A", "A"]
    assert [node.content[0] for node in walked] == ["1", "3"]


def test_walk_elements_is_preorder():
    snapshot = parse_html("<html><body><div><span></span><p></p></div><em></em></body></html>")

    walked = list(walk_elements(snapshot.root, lambda node: NodeFilter.ACCEPT))

    assert [node.tag_name for node in walked] == ["DIV", "SPAN", "P", "EM"]


def test_snapshot_from_capture_payload():
    payload = {
        "tag": "HTML",
        "attributes": {},
        "visible": True,
        "root": False,
        "children": [
            {
                "tag": "BODY",
                "attributes": {},
                "visible": True,
                "children": [
                    {
                        "tag": "FORM",
                        "attributes": {"id": "login"},
                        "visible": True,
                        "root": True,
                        "children": [
                            {"tag": "INPUT", "attributes": {"name": "user"}, "visible": True, "children": []},
                            "\n",
                            {"tag": "BUTTON", "attributes": {"value": None}, "visible": False, "children": ["Go"]},
                        ],
                    }
                ],
            }
        ],
    }

    snapshot = snapshot_from_capture(payload, url="http://example.com")
    dom = SnapshotDom(snapshot)

    assert snapshot.root.tag_name == "FORM"
    assert snapshot.url == "http://example.com"
    assert [node.tag_name for node in scan_interactive_elements(snapshot.root, dom)] == ["INPUT"]
    assert _nodes(snapshot, "BUTTON")[0].attributes["value"] == ""
