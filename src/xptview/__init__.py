"""
Inspect SAS XPORT/XPT-format files.
"""

# Standard Library
import enum
import logging
from collections import namedtuple

# Community Packages
import pandas as pd

from .__about__ import __version__  # noqa: F401 module imported but unused

LOG = logging.getLogger(__name__)

__all__ = [
    'Dataset',
    'Field',
    'Format',
    'Informat',
    'InvalidFieldDescriptor',
    'InvalidHeader',
    'InvalidMember',
    'RowLayoutError',
    'TruncatedRecord',
    'VariableType',
    'XportError',
    'XptFile',
    'parse',
    'read',
]

########################################################################
# Errors


class XportError(ValueError):
    """
    Document does not match the SAS Transport (XPORT) format.
    """

    def __init__(self, message, offset=None):
        """
        Initialize with a message and the byte offset of the problem.
        """
        super().__init__(message, offset)
        self.message = message
        self.offset = offset

    def __str__(self):
        """
        Human-readable message.
        """
        if self.offset is None:
            return self.message
        return f'{self.message} at byte {self.offset}'


class TruncatedRecord(XportError):
    """Fewer bytes remain than a fixed-size record requires."""


class InvalidHeader(XportError):
    """Library header record is absent or corrupt."""


class InvalidMember(XportError):
    """Member framing is absent where a member is expected."""


class InvalidFieldDescriptor(XportError):
    """Bad variable type or length in a NAMESTR record."""


class RowLayoutError(XportError):
    """Degenerate or inconsistent observation geometry."""


########################################################################
# Metadata


class VariableType(enum.IntEnum):
    """
    SAS variables can be either Numeric or Character type.
    """
    NUMERIC = 1
    CHARACTER = 2


class FormatAlignment(enum.IntEnum):
    """
    SAS formats are either left- or right-aligned.
    """
    LEFT = 0
    RIGHT = 1


class Informat:
    """
    SAS variable informat.
    """

    def __init__(self, name='', length=0, decimals=0):
        """
        Initialize an input format.
        """
        self._name = name
        self._length = length
        self._decimals = decimals

    def __str__(self):
        """
        Pleasant display value.
        """
        if not (self.name or self.length or self.decimals):
            return ''
        length = self.length if self.length else ''
        decimals = self.decimals if self.decimals else ''
        return f'{self.name}{length}.{decimals}'

    def __repr__(self):
        """
        REPL-format string.
        """
        return '{cls}(name={name!r}, length={length!r}, decimals={decimals!r})'.format(
            cls=type(self).__name__,
            name=self.name,
            length=self.length,
            decimals=self.decimals,
        )

    @classmethod
    def from_struct_tokens(cls, name, length, decimals):
        """
        Create an informat from unpacked struct tokens.
        """
        name = name.strip(b'\x00').decode('ascii', errors='replace').strip()
        return cls(name=name, length=length, decimals=decimals)

    @property
    def name(self):
        """The name of the format."""  # noqa: D401
        return self._name

    @property
    def length(self):
        """The width value of the format: ``INFORMATw.``."""  # noqa: D401
        return self._length

    @property
    def decimals(self):
        """The ``d`` value of numeric formats: ``INFORMATw.d``."""  # noqa: D401
        return self._decimals

    def __eq__(self, other):
        """Equality."""
        if not isinstance(other, Informat):
            return NotImplemented
        attributes = [
            'name',
            'length',
            'decimals',
        ]
        return all(getattr(self, a) == getattr(other, a) for a in attributes)

    def __hash__(self):
        """Hash."""
        return hash((self.name, self.length, self.decimals))


class Format(Informat):
    """
    SAS variable format.
    """

    def __init__(self, name='', length=0, decimals=0, justify=FormatAlignment.LEFT):
        """
        Initialize a SAS variable format.
        """
        self._justify = justify
        super().__init__(name, length, decimals)

    def __repr__(self):
        """
        REPL-format string.
        """
        fmt = '{cls}(name={name!r}, length={length!r}, decimals={decimals!r}, justify={justify})'
        return fmt.format(
            cls=type(self).__name__,
            name=self.name,
            length=self.length,
            decimals=self.decimals,
            justify=self.justify,
        )

    @classmethod
    def from_struct_tokens(cls, name, length, decimals, justify):
        """
        Create a format from unpacked struct tokens.
        """
        form = super().from_struct_tokens(name, length, decimals)
        try:
            form._justify = FormatAlignment(justify)
        except ValueError:
            LOG.warning(f'Ignoring unknown format justification {justify!r}')
        return form

    @property
    def justify(self):
        """
        Left- or right-alignment.
        """
        return self._justify

    def __eq__(self, other):
        """Equality."""
        if not isinstance(other, Format):
            return NotImplemented
        return super().__eq__(other) and self.justify == other.justify

    def __hash__(self):
        """Hash."""
        return hash((self.name, self.length, self.decimals, self.justify))


class Field(namedtuple('Field', 'name vtype length position label number format informat')):
    """
    SAS variable metadata, one column of a dataset.

    ``position`` is the byte offset of the value within an observation
    and ``length`` is its width in bytes.  ``label`` is ``None`` when
    the variable has no label.
    """

    def __new__(
        cls,
        name,
        vtype,
        length,
        position,
        label=None,
        number=None,
        format=None,
        informat=None,
    ):
        """
        Create a field, coercing the variable type.
        """
        vtype = VariableType(vtype)
        return super().__new__(cls, name, vtype, length, position, label, number, format, informat)

    def to_dict(self):
        """
        Plain structured value for serialization.
        """
        return {
            'name': self.name,
            'label': self.label,
            'type': self.vtype.name.title(),
            'length': self.length,
            'position': self.position,
            'format': str(self.format) if self.format is not None else '',
        }


########################################################################
# Data


class Dataset:
    """
    SAS data set: variable metadata plus a preview of its observations.

    ``rows`` holds at most a preview of the observations, each a
    ``dict`` from variable name to value, while ``observation_count`` is
    the true number of observations in the file.
    """

    _metadata = [
        'name',
        'label',
        'dataset_type',
        'created',
        'modified',
    ]

    def __init__(
        self,
        name,
        fields=(),
        rows=(),
        observation_count=None,
        label=None,
        dataset_type='',
        created=None,
        modified=None,
    ):
        """
        Initialize SAS dataset metadata and preview rows.
        """
        self.name = name
        self.fields = tuple(fields)
        self.rows = tuple(rows)
        if observation_count is None:
            observation_count = len(self.rows)
        self.observation_count = observation_count
        self.label = label
        self.dataset_type = dataset_type
        self.created = created
        self.modified = modified

    def __repr__(self):
        """
        REPL-format string.
        """
        metadata = {name: getattr(self, name) for name in self._metadata}
        metadata = (f'{k}={v!r}' for k, v in metadata.items() if v)
        return '<{cls} {metadata} observations={n} variables={fields}>'.format(
            cls=type(self).__name__,
            metadata=' '.join(metadata),
            n=self.observation_count,
            fields=[f.name for f in self.fields],
        )

    def __eq__(self, other):
        """
        Compare metadata, variables, and preview rows.
        """
        if not isinstance(other, Dataset):
            return NotImplemented
        attributes = self._metadata + ['observation_count', 'fields', 'rows']
        return all(getattr(self, a) == getattr(other, a) for a in attributes)

    @property
    def contents(self):
        """
        Variable metadata, such as type, length, position, and label.
        """
        columns = ['Variable', 'Type', 'Length', 'Position', 'Format', 'Informat', 'Label']
        df = pd.DataFrame([{
            'Variable': f.name,
            'Type': f.vtype.name.title(),
            'Length': f.length,
            'Position': f.position,
            'Format': str(f.format) if f.format is not None else '',
            'Informat': str(f.informat) if f.informat is not None else '',
            'Label': f.label if f.label is not None else '',
        } for f in self.fields], columns=columns)
        df.index = df.index + 1
        df.index.name = '#'
        return df

    def to_dataframe(self):
        """
        Preview rows as a Pandas ``DataFrame``, one column per variable.
        """
        data = {}
        for field in self.fields:
            values = [row[field.name] for row in self.rows]
            dtype = 'float' if field.vtype == VariableType.NUMERIC else 'string'
            data[field.name] = pd.Series(values, dtype=dtype)
        return pd.DataFrame(data, columns=[f.name for f in self.fields])

    def to_dict(self):
        """
        Plain structured value for serialization.
        """
        return {
            'name': self.name,
            'label': self.label,
            'createdDate': self.created.isoformat() if self.created else None,
            'modifiedDate': self.modified.isoformat() if self.modified else None,
            'observationCount': self.observation_count,
            'fields': [f.to_dict() for f in self.fields],
            'rows': [dict(row) for row in self.rows],
        }


class XptFile:
    """
    Datasets decoded from one SAS Transport file, in file order.
    """

    def __init__(self, path='', datasets=()):
        """
        Initialize a decoded transport file.
        """
        self.path = path
        self.datasets = tuple(datasets)

    def __repr__(self):
        """
        REPL-format string.
        """
        fmt = '<{cls} path={path!r} datasets={names}>'
        return fmt.format(cls=type(self).__name__, path=self.path, names=self.names)

    @property
    def names(self):
        """
        Dataset names, in file order.
        """
        return [ds.name for ds in self.datasets]

    def __getitem__(self, name):
        """
        Get the first dataset with the given name.
        """
        for ds in self.datasets:
            if ds.name == name:
                return ds
        raise KeyError(name)

    def __iter__(self):
        """
        Get an iterator of datasets.
        """
        return iter(self.datasets)

    def __len__(self):
        """
        Get the number of datasets.
        """
        return len(self.datasets)

    def __eq__(self, other):
        """
        Compare equality.
        """
        if not isinstance(other, XptFile):
            return NotImplemented
        return self.path == other.path and self.datasets == other.datasets

    def to_dict(self):
        """
        Plain structured value, self-contained and JSON-serializable.
        """
        return {
            'path': self.path,
            'datasets': [ds.to_dict() for ds in self.datasets],
        }


def parse(bytestring, path='', **kwds):
    """
    Decode a SAS Transport (XPORT) document from a byte string.

    See ``xptview.v56.parse`` for keyword arguments.
    """
    # Avoid circular import problems.
    # Xptview Modules
    from xptview.v56 import parse
    return parse(bytestring, path, **kwds)


def read(path, **kwds):
    """
    Read and decode a SAS Transport (XPORT) file.

        >>> xpt = read('example.xpt')
    """
    # Avoid circular import problems.
    # Xptview Modules
    from xptview.v56 import read
    return read(path, **kwds)
