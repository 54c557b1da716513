"""
Op types.

Each op type is a marker class with a NAME. Implementations register against
an op type; callers look ops up by the type or by its name. Grouping classes
(Ops.Copy, Ops.Stats, ...) are plain namespaces.
"""


class Op:
    """Base marker of all op types."""
    NAME = None


class Ops:
    """Namespace of the built-in op types."""

    class Copy:
        class RAI(Op):
            NAME = "copy.rai"

        class LabelingMapping(Op):
            NAME = "copy.labeling_mapping"

        class ImgLabeling(Op):
            NAME = "copy.img_labeling"

    class Filter:
        class PaddingIntervalCentered(Op):
            NAME = "filter.padding_interval_centered"

        class PaddingIntervalOrigin(Op):
            NAME = "filter.padding_interval_origin"

    class Stats:
        class Mean(Op):
            NAME = "stats.mean"

        class StdDev(Op):
            NAME = "stats.std_dev"

    class Threshold:
        class LocalSauvolaThreshold(Op):
            NAME = "threshold.local_sauvola"

        class LocalMeanThreshold(Op):
            NAME = "threshold.local_mean"

        class Otsu(Op):
            NAME = "threshold.otsu"

    class Math:
        class Add(Op):
            NAME = "math.add"

        class Subtract(Op):
            NAME = "math.subtract"

        class ComplexLog(Op):
            NAME = "math.complex_log"

    class Map(Op):
        NAME = "map"
