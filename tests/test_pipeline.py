import pytest

from lexrelay.extract import ExtractionError, UploadedFile, UploadLimitError
from lexrelay.generate import Dispatcher, ErrorKind
from lexrelay.personas import ConversationRequest, PersonaRegistry
from lexrelay.personas.prompts import DOCS_START
from lexrelay.pipeline import AskPipeline, InvalidRequest

registry = PersonaRegistry.from_yaml()


class StubClient:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def generate(self, prompt, params):
        self.prompts.append(prompt)
        return (self.answers.pop(0) if self.answers else "A full answer."), {"engine": "stub"}


class StubExtractor:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    def __call__(self, path, mime):
        with open(path, "rb") as f:
            name = f.read().decode()
        self.calls.append(name)
        if name in self.failing:
            raise ExtractionError("unreadable")
        return f"contents of {name}"


def make(stub=None, extractor=None, **kw):
    stub = stub or StubClient()
    return AskPipeline(registry, Dispatcher(stub), extractor=extractor or StubExtractor(), **kw), stub


def uploads(*names):
    return [UploadedFile(original_name=n, mime_type="application/pdf", content=n.encode()) for n in names]


@pytest.mark.parametrize("query", ["", " ", "\n\t  "])
def test_empty_query_rejected_with_zero_upstream_calls(query):
    extractor = StubExtractor()
    pipeline, stub = make(extractor=extractor)
    with pytest.raises(InvalidRequest):
        pipeline.run(ConversationRequest(query=query), uploads("a.pdf"))
    assert stub.prompts == []
    assert extractor.calls == []


def test_answer_returned():
    pipeline, stub = make(StubClient("Section 41A notice is..."))
    result = pipeline.run(ConversationRequest(query="What is a 41A notice?", tool="bareActs"))
    assert result.ok
    assert result.answer_text == "Section 41A notice is..."
    assert len(stub.prompts) == 1


def test_one_failed_file_keeps_the_others():
    extractor = StubExtractor(failing={"b.pdf"})
    pipeline, stub = make(extractor=extractor)

    pipeline.run(ConversationRequest(query="Compare these"), uploads("a.pdf", "b.pdf", "c.pdf", "d.pdf"))

    assert extractor.calls == ["a.pdf", "b.pdf", "c.pdf", "d.pdf"]
    prompt = stub.prompts[0]
    for name in ("a.pdf", "c.pdf", "d.pdf"):
        assert f"contents of {name}" in prompt
    assert "[File 2: b.pdf]\n[Could not extract text: unreadable]" in prompt
    assert prompt.index("[File 1: a.pdf]") < prompt.index("[File 3: c.pdf]") < prompt.index("[File 4: d.pdf]")


def test_upload_limits_checked_before_extraction_and_dispatch():
    extractor = StubExtractor()
    pipeline, stub = make(extractor=extractor, max_files=2)
    with pytest.raises(UploadLimitError):
        pipeline.run(ConversationRequest(query="q"), uploads("a.pdf", "b.pdf", "c.pdf"))
    assert extractor.calls == []
    assert stub.prompts == []


@pytest.mark.parametrize("tool", ["optimizer", "followup"])
def test_mode_tools_skip_extraction(tool):
    extractor = StubExtractor()
    pipeline, stub = make(extractor=extractor)
    pipeline.run(ConversationRequest(query="q", tool=tool), uploads("a.pdf"))
    assert extractor.calls == []
    assert DOCS_START not in stub.prompts[0]


def test_unconfigured_provider_surfaces_error_kind():
    pipeline = AskPipeline(registry, Dispatcher(None), extractor=StubExtractor())
    result = pipeline.run(ConversationRequest(query="q"))
    assert result.error_kind is ErrorKind.PROVIDER_UNAVAILABLE


def test_identical_requests_assemble_identical_prompts():
    pipeline, stub = make()
    req = ConversationRequest(query="q", tool="contractReview", context="c", reasoning_enabled=True)
    pipeline.run(req, uploads("a.pdf"))
    pipeline.run(req, uploads("a.pdf"))
    assert stub.prompts[0] == stub.prompts[1]


def test_unexpected_file_error_still_dispatches():
    class FlakyExtractor(StubExtractor):
        def __call__(self, path, mime):
            if path.endswith("b.pdf"):
                raise OSError("disk read failed")
            return super().__call__(path, mime)

    pipeline, stub = make(extractor=FlakyExtractor())
    result = pipeline.run(ConversationRequest(query="Compare these"), uploads("a.pdf", "b.pdf", "c.pdf"))

    assert result.ok
    assert len(stub.prompts) == 1
    assert "contents of a.pdf" in stub.prompts[0]
    assert "contents of c.pdf" in stub.prompts[0]
    assert "[File 2: b.pdf]\n[Could not extract text:" in stub.prompts[0]


def test_unconfigured_provider_skips_extraction():
    extractor = StubExtractor()
    pipeline = AskPipeline(registry, Dispatcher(None), extractor=extractor)
    result = pipeline.run(ConversationRequest(query="q"), uploads("a.pdf"))
    assert result.error_kind is ErrorKind.PROVIDER_UNAVAILABLE
    assert extractor.calls == []
