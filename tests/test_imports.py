def test_import_questline_package() -> None:
    import importlib

    module = importlib.import_module("questline")
    assert module is not None
    assert module.__version__


def test_import_speech_handler_has_no_side_effects() -> None:
    from questline.presentation.speech import handler

    assert handler._default_handler is None
