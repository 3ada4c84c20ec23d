import asyncio

import pytest

from translator.errors import NoAudioProduced, RemoteFailure
from translator.session import NoticeBoard, PlaybackStatus, SpeechPlaybackController

from .fakes import OutputFactorySpy, StubSpeech, wait_for


def _controller(speech=None, factory=None, notices=None) -> SpeechPlaybackController:
    return SpeechPlaybackController(
        speech or StubSpeech(),
        factory or OutputFactorySpy(),
        notices=notices or NoticeBoard(default_ttl_ms=0),
    )


@pytest.mark.asyncio
async def test_second_speak_while_active_is_rejected():
    factory = OutputFactorySpy(hold=True)
    speech = StubSpeech()
    controller = _controller(speech, factory)

    first = asyncio.create_task(controller.speak("hello"))
    await asyncio.sleep(0)
    assert controller.status == PlaybackStatus.SYNTHESIZING

    assert await controller.speak("hello") is False
    await wait_for(lambda: controller.status == PlaybackStatus.PLAYING)
    assert await controller.speak("hello") is False

    factory.created[0].finished.set()
    assert await first is True
    assert controller.status == PlaybackStatus.IDLE
    assert speech.calls == ["hello"]
    assert len(factory.created[0].played) == 1


@pytest.mark.asyncio
async def test_back_to_back_speak_calls_only_play_once():
    factory = OutputFactorySpy()
    controller = _controller(factory=factory)

    results = await asyncio.gather(controller.speak("hello"), controller.speak("hello"))

    assert results == [True, False]
    assert controller.status == PlaybackStatus.IDLE
    assert len(factory.created[0].played) == 1


@pytest.mark.asyncio
async def test_output_is_created_lazily_once_at_24khz():
    factory = OutputFactorySpy()
    controller = _controller(factory=factory)
    assert factory.created == []

    await controller.speak("one")
    await controller.speak("two")

    assert len(factory.created) == 1
    output = factory.created[0]
    assert output.sample_rate_hz == 24_000
    assert output.channels == 1
    assert [buffer.sample_rate_hz for buffer in output.played] == [24_000, 24_000]


@pytest.mark.asyncio
async def test_transitions_and_notices_on_success():
    notices = NoticeBoard(default_ttl_ms=0)
    controller = _controller(notices=notices)
    statuses = []
    messages = []
    controller.add_listener(lambda session: statuses.append(session.status))
    notices.add_listener(messages.append)

    assert await controller.speak("hello") is True

    assert statuses == [PlaybackStatus.SYNTHESIZING, PlaybackStatus.PLAYING, PlaybackStatus.IDLE]
    assert messages == ["Speaking...", ""]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "speech",
    [
        StubSpeech(exc=RemoteFailure("quota")),
        StubSpeech(exc=NoAudioProduced("nothing")),
        StubSpeech(audio=b""),
        StubSpeech(audio=b"\x01"),
    ],
)
async def test_failures_return_to_idle_with_notice(speech):
    notices = NoticeBoard(default_ttl_ms=0)
    controller = _controller(speech, notices=notices)
    statuses = []
    controller.add_listener(lambda session: statuses.append(session.status))

    assert await controller.speak("hello") is False

    assert controller.status == PlaybackStatus.IDLE
    assert statuses == [PlaybackStatus.SYNTHESIZING, PlaybackStatus.ERROR, PlaybackStatus.IDLE]
    assert notices.current == "Error generating speech."
    # controller is usable again
    controller.speech = StubSpeech()
    assert await controller.speak("again") is True


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   "])
async def test_empty_text_is_rejected(text):
    speech = StubSpeech()
    factory = OutputFactorySpy()
    controller = _controller(speech, factory)

    assert await controller.speak(text) is False
    assert speech.calls == []
    assert factory.created == []


@pytest.mark.asyncio
async def test_cancelled_speak_returns_to_idle():
    controller = _controller(StubSpeech(delay=1.0))

    task = asyncio.create_task(controller.speak("hello"))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert controller.status == PlaybackStatus.IDLE


@pytest.mark.asyncio
async def test_close_releases_output():
    factory = OutputFactorySpy()
    controller = _controller(factory=factory)
    await controller.speak("hello")

    controller.close()

    assert factory.created[0].closed is True


@pytest.mark.asyncio
async def test_notice_expires_after_ttl():
    notices = NoticeBoard(default_ttl_ms=10)
    notices.post("Copied!")
    assert notices.current == "Copied!"

    await asyncio.sleep(0.05)
    assert notices.current == ""


@pytest.mark.asyncio
async def test_newer_notice_is_not_cleared_by_older_expiry():
    notices = NoticeBoard(default_ttl_ms=10)
    notices.post("first")
    notices.post("second", ttl_ms=0)

    await asyncio.sleep(0.05)
    assert notices.current == "second"
