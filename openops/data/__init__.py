"""
Data containers for openops: element types, array images and labelings.
"""

from openops.data.img import (ArrayImg, ArrayImgFactory, Cursor, Interval,
                              RandomAccess, equal_dimensions)
from openops.data.labeling import ImgLabeling, LabelingMapping
from openops.data.types import (BitType, ByteType, ComplexDoubleType,
                                ComplexType, DoubleType, IntegerType,
                                NumericType, RealType, UnsignedByteType,
                                type_for_dtype)

__all__ = [
    "ArrayImg", "ArrayImgFactory", "Cursor", "RandomAccess", "Interval", "equal_dimensions",
    "ImgLabeling", "LabelingMapping",
    "NumericType", "ComplexType", "ComplexDoubleType", "RealType", "DoubleType",
    "IntegerType", "ByteType", "UnsignedByteType", "BitType", "type_for_dtype",
]
