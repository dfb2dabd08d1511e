from fakes import FakePlayer
from kai.voice_server.emotions import EMOTIONS
from kai.voice_server.notifier import VoiceNotifier
from kai.voice_server.tts import ProviderCascade, ProviderError
from kai.voice_server.voice_config import VoicesConfig


def _notifier(settings, providers, player=None, chime=None, **overrides):
    settings = settings.model_copy(update=overrides)
    return VoiceNotifier(
        settings,
        VoicesConfig(None),
        cascade=ProviderCascade(settings, **providers),
        player=player or FakePlayer(),
        chime=chime or FakePlayer(),
    )


def test_speaks_with_emotion_and_personality_voice(settings, providers):
    player = FakePlayer()
    notifier = _notifier(settings, providers, player=player)

    assert notifier.notify("Tests pass", voice_id="engineer", emotion="celebration") is True

    text, voice_settings, voice_id = providers["elevenlabs"].calls[0]
    assert text == "Tests pass"
    assert voice_settings == EMOTIONS["celebration"].settings
    assert voice_id == VoicesConfig(None).profiles()["engineer"].voice_id

    (data, suffix), kwargs = player.calls[0]
    assert data == b"audio-elevenlabs"
    assert suffix == ".mp3"
    assert kwargs["volume"] == 0.8


def test_chime_plays_first_when_enabled(settings, providers):
    order = []
    player = FakePlayer()
    chime = FakePlayer()
    player.calls = _Recorder(order, "speech")
    chime.calls = _Recorder(order, "chime")

    _notifier(settings, providers, player=player, chime=chime, chime_enabled=True).notify("hi")
    assert order == ["chime", "speech"]


def test_chime_disabled(settings, providers):
    chime = FakePlayer()
    _notifier(settings, providers, chime=chime, chime_enabled=False).notify("hi")
    assert chime.calls == []


def test_all_providers_failing_is_logged_to_error_log(settings, providers):
    for name, provider in providers.items():
        provider.error = ProviderError(name, "broken")
    player = FakePlayer()

    assert _notifier(settings, providers, player=player).notify("lost message") is False
    assert player.calls == []

    log_text = settings.tts_error_log.read_text()
    assert "All TTS providers failed" in log_text
    assert "lost message" in log_text


def test_playback_failure_does_not_raise(settings, providers):
    assert _notifier(settings, providers, player=FakePlayer(result=False)).notify("hi") is False


class _Recorder(list):
    def __init__(self, order, label):
        super().__init__()
        self.order = order
        self.label = label

    def append(self, item):
        self.order.append(self.label)
        super().append(item)
