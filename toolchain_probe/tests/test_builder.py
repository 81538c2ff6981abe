"""
test_builder — merge order of the flag accumulator.

The emitted order depends only on FlagStage, never on the order in which
stages add their flags.
"""
from toolchain_probe.core.builder import ConfigBuilder, FlagStage


class TestConfigBuilder:

    def test_stage_order_not_call_order(self):
        b = ConfigBuilder(compiler="cc")
        b = b.with_cflags(FlagStage.EXTRA, ["-DUSER"])
        b = b.with_cflags(FlagStage.OPENMP, ["-fopenmp"])
        b = b.with_cflags(FlagStage.SSE, ["-msse"])
        b = b.with_cflags(FlagStage.DEBUG, ["-DNDEBUG"])
        b = b.with_cflags(FlagStage.BASE, ["-O3"])

        assert b.cflags() == ["-O3", "-DNDEBUG", "-msse", "-fopenmp", "-DUSER"]

    def test_same_stage_keeps_insertion_order(self):
        b = ConfigBuilder(compiler="cc")
        b = b.with_cflags(FlagStage.AUXILIARY, ["-a"])
        b = b.with_cflags(FlagStage.AUXILIARY, ["-b", "-c"])

        assert b.cflags() == ["-a", "-b", "-c"]

    def test_math_library_last(self):
        b = ConfigBuilder(compiler="cc", math_library="-lm")
        b = b.with_ldflags(FlagStage.EXTRA, ["-L/opt/lib", "-lfoo"])
        b = b.with_ldflags(FlagStage.BASE, ["-Wl,-O1"])

        assert b.ldflags() == ["-Wl,-O1", "-L/opt/lib", "-lfoo", "-lm"]

    def test_with_flags_targets_both(self):
        b = ConfigBuilder(compiler="cc").with_flags(FlagStage.OPENMP, ["-fopenmp"])

        assert b.cflags() == ["-fopenmp"]
        assert b.ldflags() == ["-fopenmp", "-lm"]

    def test_builders_are_immutable(self):
        base = ConfigBuilder(compiler="cc")
        derived = base.with_cflags(FlagStage.BASE, ["-O2"])

        assert base.cflags() == []
        assert derived.cflags() == ["-O2"]
