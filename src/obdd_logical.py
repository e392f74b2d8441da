# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

from enum import Enum


class Logical(Enum):
    '''
    Binary boolean operators used to fold the outcomes of two obdds.
    NOT is binary as well, it is true when both inputs differ.
    '''
    AND = 'and'
    OR = 'or'
    NOT = 'not'
    NAND = 'nand'
    NOR = 'nor'
    XOR = 'xor'

    def apply(self, first, second):
        return _OPERATIONS[self](bool(first), bool(second))

    def __call__(self, first, second):
        return self.apply(first, second)

    @classmethod
    def from_name(cls, name):
        '''Case insensitive lookup, used for command line arguments'''
        return cls[name.strip().upper()]


_OPERATIONS = {
    Logical.AND: lambda a, b: a and b,
    Logical.OR: lambda a, b: a or b,
    Logical.NOT: lambda a, b: a != b,
    Logical.NAND: lambda a, b: not (a and b),
    Logical.NOR: lambda a, b: not (a or b),
    Logical.XOR: lambda a, b: a ^ b,
}
