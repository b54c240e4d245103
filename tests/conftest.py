import base64

import pytest

from meal_analyzer.models import default_registry

# a few bytes are enough, the image is passed through untouched
IMAGE_B64 = base64.b64encode(b"\xff\xd8\xff\xe0fake-jpeg-bytes").decode("utf-8")

RICE_REPLY = 'Sure! {"food_items":[{"name":"Rice","calories":200}]}'


class FakeInvoker:
    """Records every call and returns (or raises) a preset result."""

    def __init__(self, reply=RICE_REPLY, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def invoke(self, prompt, image_b64, profile):
        self.calls.append({"prompt": prompt, "image": image_b64, "profile": profile})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def image_b64():
    return IMAGE_B64


@pytest.fixture
def registry():
    return default_registry()
