def test_can_import_all_protocols():
    # Import must succeed and expose the expected names
    import livetpl.core.interfaces as I

    assert hasattr(I, "CompletionProvider")
    assert hasattr(I, "DocumentProtocol")
    assert hasattr(I, "InputSourceProtocol")
    assert hasattr(I, "LoggerFactoryProtocol")
    assert hasattr(I, "LoggerLikeProtocol")
    assert hasattr(I, "PreviewProtocol")


def test_bundled_adapters_fulfill_protocols():
    import livetpl.core.interfaces as I
    from livetpl.adapters import InMemoryDocument
    from livetpl.editing.keys import ScriptedInput
    from livetpl.logging import DefaultLoggerFactory

    assert isinstance(InMemoryDocument(["x"]), I.DocumentProtocol)
    assert isinstance(ScriptedInput("a"), I.InputSourceProtocol)
    assert isinstance(DefaultLoggerFactory(), I.LoggerFactoryProtocol)
