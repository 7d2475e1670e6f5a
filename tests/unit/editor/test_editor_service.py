"""Tests for the editor service."""

import asyncio

import pytest

from richedit.config import CustomClass, EditorConfig
from richedit.dom import EditableDocument, Range, Selection
from richedit.editor import EditorService, run_with_retry
from richedit.exceptions import EditorOperationError, NoSelectionError


class RecordingHost:
    """Host whose commands report scripted results."""

    def __init__(self, results: list[bool]) -> None:
        self.results = list(results)
        self.calls: list[tuple[str, str | None]] = []
        self.selection = Selection()

    def get_selection(self) -> Selection:
        return self.selection

    def exec_command(self, command: str, show_ui: bool = False, value: str | None = None) -> bool:
        self.calls.append((command, value))
        return self.results.pop(0) if self.results else False


@pytest.fixture
def doc():
    return EditableDocument.from_html("<p>Hello world</p>")


@pytest.fixture
def service(doc):
    return EditorService(doc)


def select(document: EditableDocument, start: int, end: int) -> Range:
    text = document.find("p").contents[0]
    range_ = Range(text, start, text, end)
    selection = document.get_selection()
    selection.remove_all_ranges()
    selection.add_range(range_)
    return range_


def save(service: EditorService, document: EditableDocument, start: int, end: int) -> Range:
    """Select and capture, as a blur event would."""
    range_ = select(document, start, end)
    service.save_selection(document.root)
    return range_


class TestRunWithRetry:
    """Tests for run_with_retry."""

    def test_first_attempt_succeeds(self):
        calls = []

        def operation():
            calls.append(1)
            return True

        assert run_with_retry(operation, "insertHTML") is True
        assert len(calls) == 1

    def test_second_attempt_succeeds(self):
        results = [False, True]
        assert run_with_retry(lambda: results.pop(0), "insertHTML") is True
        assert results == []

    def test_fails_after_two_attempts(self):
        calls = []

        def operation():
            calls.append(1)
            return False

        with pytest.raises(EditorOperationError) as exc_info:
            run_with_retry(operation, "insertHTML")

        assert len(calls) == 2
        assert exc_info.value.command == "insertHTML"
        assert "Unable to perform the operation" in str(exc_info.value)


class TestInsertHtml:
    """Tests for EditorService.insert_html."""

    def test_markup_retried_once(self):
        host = RecordingHost([False, True])
        EditorService(host).insert_html("<b>x</b>")

        assert host.calls == [("insertHTML", "<b>x</b>"), ("insertHTML", "<b>x</b>")]

    def test_markup_failing_twice_raises(self):
        host = RecordingHost([False, False, True])
        with pytest.raises(EditorOperationError):
            EditorService(host).insert_html("<b>x</b>")

        assert len(host.calls) == 2

    def test_markup_inserted(self, doc, service):
        select(doc, 6, 11)
        service.insert_html("<em>there</em>")

        assert doc.to_html() == "<p>Hello <em>there</em></p>"

    def test_element_inserted_verbatim(self, doc, service):
        range_ = select(doc, 6, 11)
        img = doc.soup.new_tag("img", attrs={"data-keep": "1", "src": "a.png"})

        service.insert_html(img)

        assert doc.to_html() == '<p>Hello <img data-keep="1" src="a.png"/></p>'
        assert img.parent is doc.find("p")
        assert range_.collapsed is True
        assert range_.start_offset == img.parent.index(img) + 1

    def test_element_without_range(self):
        doc = EditableDocument.from_html("<p>x</p>")
        img = doc.soup.new_tag("img")

        EditorService(doc).insert_html(img)

        assert img.parent is None

    def test_rejects_other_types(self, service):
        with pytest.raises(TypeError):
            service.insert_html(42)

    def test_insert_arbitrary_html(self, doc, service):
        select(doc, 0, 5)
        service.insert_arbitrary_html("<i>Hi</i>")

        assert doc.to_html() == "<p><i>Hi</i> world</p>"


class TestCommands:
    """Tests for toolbar commands."""

    def test_block_tag_goes_through_format_block(self):
        host = RecordingHost([True])
        assert EditorService(host).execute_command("h2") is True
        assert host.calls == [("formatBlock", "h2")]

    def test_plain_command(self):
        host = RecordingHost([True])
        EditorService(host).execute_command("bold")
        assert host.calls == [("bold", None)]

    def test_edit_cmd_restores_selection_first(self, doc, service):
        save(service, doc, 0, 5)
        select(doc, 6, 11)

        assert service.execute_command("bold") is True
        assert doc.to_html() == "<p><b>Hello</b> world</p>"

    def test_format_block(self, doc, service):
        select(doc, 1, 1)
        assert service.execute_command("h1") is True
        assert doc.to_html() == "<h1>Hello world</h1>"

    def test_create_relative_link(self, doc, service):
        select(doc, 0, 5)
        assert service.create_link("/docs") is True
        assert doc.to_html() == '<p><a href="/docs">Hello</a> world</p>'

    def test_create_absolute_link_opens_new_tab(self, doc, service):
        save(service, doc, 0, 5)
        assert service.create_link("https://example.com/?a=1&b=2") is True
        assert doc.to_html() == (
            '<p><a href="https://example.com/?a=1&amp;b=2" target="_blank">Hello</a> world</p>'
        )

    def test_insert_color_needs_saved_selection(self, doc, service):
        select(doc, 0, 5)
        assert service.insert_color("red", "textColor") is False
        assert doc.to_html() == "<p>Hello world</p>"

    def test_insert_text_color(self, doc, service):
        save(service, doc, 0, 5)
        assert service.insert_color("red", "textColor") is True
        assert doc.to_html() == '<p><font color="red">Hello</font> world</p>'

    def test_insert_background_color(self):
        host = RecordingHost([True])
        service = EditorService(host)
        text = EditableDocument.from_html("<p>abc</p>").find("p").contents[0]
        host.selection.add_range(Range(text, 0, text, 2))
        service.save_selection(text.parent)

        assert service.insert_color("#ff0", "backgroundColor") is True
        assert host.calls == [("hiliteColor", "#ff0")]

    def test_font_name(self, doc, service):
        select(doc, 0, 5)
        assert service.set_font_name("Arial") is True
        assert doc.to_html() == '<p><font face="Arial">Hello</font> world</p>'

    def test_font_size(self):
        host = RecordingHost([True])
        EditorService(host).set_font_size("5")
        assert host.calls == [("fontSize", "5")]

    def test_default_paragraph_separator(self, doc):
        service = EditorService(doc, config=EditorConfig(default_paragraph_separator="p"))
        assert service.set_default_paragraph_separator() is True
        assert doc.default_paragraph_separator == "p"

        assert service.set_default_paragraph_separator("div") is True
        assert doc.default_paragraph_separator == "div"


class TestCustomClass:
    """Tests for EditorService.create_custom_class."""

    def test_wraps_in_tag(self, doc, service):
        save(service, doc, 0, 5)
        service.create_custom_class(CustomClass(name="Quote", class_name="quote", tag="q"))

        assert doc.to_html() == '<p><q class="quote">Hello</q> world</p>'

    def test_defaults_to_span(self, doc, service):
        save(service, doc, 6, 11)
        service.create_custom_class(CustomClass(name="Note", class_name="note"))

        assert doc.to_html() == '<p>Hello <span class="note">world</span></p>'

    def test_none_reinserts_text(self, doc, service):
        save(service, doc, 0, 5)
        service.create_custom_class(None)

        assert doc.to_html() == "<p>Hello world</p>"


class TestCheckSelection:
    """Tests for EditorService.check_selection."""

    def test_nothing_saved(self, service):
        with pytest.raises(NoSelectionError, match="No Selection Made"):
            service.check_selection()

    def test_caret_only(self, doc, service):
        save(service, doc, 2, 2)
        with pytest.raises(NoSelectionError):
            service.check_selection()

    def test_text_selected(self, doc, service):
        save(service, doc, 0, 5)
        assert service.check_selection() is True
        assert service.selected_text == "Hello"

    def test_boundary_container_unwrapped(self):
        doc = EditableDocument.from_html("<p><b>Hello</b> world</p>")
        p = doc.find("p")
        selection = doc.get_selection()
        selection.add_range(Range(p.b, 0, p.contents[1], 3))
        service = EditorService(doc)
        service.save_selection(doc.root)

        assert service.remove_selected_elements("b") == 1
        with pytest.raises(NoSelectionError):
            service.check_selection()


class TestRemoveSelectedElements:
    """Tests for EditorService.remove_selected_elements."""

    def test_unwraps(self):
        doc = EditableDocument.from_html("<p><b>Hello</b> world</p>")
        text = doc.find("b").contents[0]
        doc.get_selection().add_range(Range(text, 0, text, 5))

        assert EditorService(doc).remove_selected_elements("b") == 1
        assert doc.to_html() == "<p>Hello world</p>"


class TestExecuteInNextQueueIteration:
    """Tests for deferred callbacks."""

    @pytest.mark.asyncio
    async def test_runs_callback_later(self, service):
        fired = asyncio.Event()

        handle = service.execute_in_next_queue_iteration(fired.set, timeout=0.01)

        assert isinstance(handle, asyncio.TimerHandle)
        assert not fired.is_set()
        await asyncio.wait_for(fired.wait(), timeout=1)

    def test_requires_running_loop(self, service):
        with pytest.raises(RuntimeError):
            service.execute_in_next_queue_iteration(lambda: None)
