import io

import pytest
from PIL import Image

from inventory.signature.pad import SignaturePad, capture_signature, decode_payload, to_surface


def test_empty_pad_cannot_save():
    pad = SignaturePad(320)
    assert pad.can_save is False
    assert pad.save() is None


def test_tap_without_move_does_not_count():
    pad = SignaturePad()
    pad.begin_stroke(10, 10)
    pad.end_stroke()
    assert pad.can_save is False
    assert pad.save() is None


def test_stroke_produces_png_payload():
    pad = SignaturePad(320)
    pad.begin_stroke(10, 10)
    assert pad.is_drawing
    pad.move_to(50, 60)
    pad.move_to(90, 40)
    pad.end_stroke()

    payload = pad.save()
    assert payload.startswith("data:image/png;base64,")
    image = Image.open(io.BytesIO(decode_payload(payload)))
    assert image.size == (320, 200)
    assert len(pad.strokes) == 1
    assert len(pad.strokes[0]) == 3


def test_move_without_stroke_is_ignored():
    pad = SignaturePad()
    pad.move_to(5, 5)
    assert pad.strokes == ()
    assert pad.can_save is False


def test_clear_discards_strokes():
    pad = SignaturePad()
    pad.begin_stroke(0, 0)
    pad.move_to(20, 20)
    pad.clear()
    assert pad.strokes == ()
    assert pad.save() is None


def test_default_size():
    pad = SignaturePad()
    assert (pad.width, pad.height) == (300, 200)


def test_capture_signature():
    assert capture_signature([[(1, 1), (30, 30)], [(40, 10), (60, 10)]]).startswith("data:image/png")
    assert capture_signature([[(5, 5)]]) is None
    assert capture_signature([]) is None


def test_to_surface():
    assert to_surface(150, 120, left=100, top=100) == (50, 20)


def test_decode_rejects_other_payloads():
    with pytest.raises(ValueError):
        decode_payload("data:image/jpeg;base64,AAAA")
