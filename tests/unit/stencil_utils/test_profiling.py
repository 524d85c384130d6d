from stencil.core.utils.profiling import Profiler, enable_profiler, get_active_profiler, span


def test_span_is_noop_without_profiler() -> None:
    assert get_active_profiler() is None
    with span("ignored", a=1):
        pass


def test_nested_spans_are_recorded_with_depth() -> None:
    profiler = Profiler()
    with enable_profiler(profiler):
        assert get_active_profiler() is profiler
        with span("outer", command="render"):
            with span("inner"):
                pass
            with span("inner"):
                pass
    assert get_active_profiler() is None

    depths = {s.name: s.depth for s in profiler.spans}
    assert depths == {"outer": 0, "inner": 1}
    assert profiler.call_counts() == {"inner": 2, "outer": 1}
    assert set(profiler.summary_ms()) == {"outer", "inner"}


def test_format_summary_orders_by_start_and_indents() -> None:
    profiler = Profiler()
    with enable_profiler(profiler):
        with span("outer", command="render"):
            with span("inner"):
                pass
    lines = profiler.format_summary().splitlines()
    assert lines[0].startswith("outer: ")
    assert lines[0].endswith("[command=render]")
    assert lines[1].startswith("  inner: ")


def test_to_dict_shape() -> None:
    profiler = Profiler()
    with profiler.span("x"):
        pass
    data = profiler.to_dict()
    assert data["calls"] == {"x": 1}
    assert data["spans"][0]["name"] == "x"
    assert data["summary_ms"]["x"] >= 0
