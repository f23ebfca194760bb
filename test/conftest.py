"""
Shared test fixtures.
"""

# Standard Library
import struct
from datetime import datetime

# Community Packages
import pytest

# Xptview Modules
import xptview


class TransportBuilder:
    """
    Assemble synthetic SAS V5 Transport documents, record by record.
    """

    timestamp = b'01JAN20:12:30:00'

    @staticmethod
    def pad(bytestring, fill=b' '):
        """
        Pad to a multiple of 80 bytes.
        """
        if len(bytestring) % 80:
            bytestring += fill * (80 - len(bytestring) % 80)
        return bytestring

    @staticmethod
    def header_record(kind, digits='0' * 30):
        return f'HEADER RECORD*******{kind:<8}HEADER RECORD!!!!!!!{digits}  '.encode('ascii')

    def library(self, kind='LIBRARY'):
        return b''.join([
            self.header_record(kind),
            b'SAS     SAS     SASLIB  9.4     X64_10PR' + b' ' * 24 + self.timestamp,
            self.timestamp.ljust(80),
        ])

    @staticmethod
    def namestr(name, vtype, length, position, number=1, label=''):
        return struct.pack(
            '>hhhh8s40s8shhh2s8shhl52s',
            vtype,
            0,
            length,
            number,
            name.encode('ascii').ljust(8),
            label.encode('ascii').ljust(40),
            b' ' * 8,
            0,
            0,
            0,
            b'\x00\x00',
            b' ' * 8,
            0,
            0,
            position,
            b'\x00' * 52,
        )

    def member(self, name, variables, observations=(), label='', namestrs=None, obs_header=True):
        """
        Encode a member from ``(name, vtype, length[, position])`` tuples
        and already-encoded observations.
        """
        if namestrs is None:
            namestrs = []
            position = 0
            for i, (vname, vtype, length, *rest) in enumerate(variables, 1):
                p = rest[0] if rest else position
                namestrs.append(self.namestr(vname, vtype, length, p, number=i))
                position += length
        records = [
            self.header_record('MEMBER', '0' * 17 + '16' + '0' * 8 + '140'),
            self.header_record('DSCRPTR'),
            b'SAS     ' + name.encode('ascii').ljust(8) + b'SASDATA 9.4     X64_10PR'
            + b' ' * 24 + self.timestamp,
            self.timestamp + b' ' * 16 + label.encode('ascii').ljust(40) + b'    DATA',
            self.header_record('NAMESTR', f'000000{len(namestrs):04d}' + '0' * 20),
            self.pad(b''.join(namestrs)),
        ]
        if obs_header:
            records.append(self.header_record('OBS'))
        records.append(self.pad(b''.join(observations)))
        return b''.join(records)

    @staticmethod
    def ibm(n):
        """
        Encode a non-negative integer as IBM-format floating point.
        """
        if n == 0:
            return b'\x00' * 8
        digits = len(f'{n:x}')
        return bytes([64 + digits]) + (n << (56 - 4 * digits)).to_bytes(7, 'big')

    @staticmethod
    def text(s, length):
        return s.encode('ascii').ljust(length)


@pytest.fixture(scope='session')
def builder():
    """
    Builder for synthetic transport documents.
    """
    return TransportBuilder()


@pytest.fixture(scope='session')
def library_bytestring():
    """
    A 4-variable, 6-observation dataset in SAS V5 Transport format.
    """
    return b'''\
HEADER RECORD*******LIBRARY HEADER RECORD!!!!!!!000000000000000000000000000000  \
SAS     SAS     SASLIB  9.3     W32_7PRO                        13NOV15:10:35:08\
13NOV15:10:35:08                                                                \
HEADER RECORD*******MEMBER  HEADER RECORD!!!!!!!000000000000000001600000000140  \
HEADER RECORD*******DSCRPTR HEADER RECORD!!!!!!!000000000000000000000000000000  \
SAS     ECON    SASDATA 9.3     W32_7PRO                        13NOV15:10:35:08\
13NOV15:10:35:08                Blank-padded dataset label                      \
HEADER RECORD*******NAMESTR HEADER RECORD!!!!!!!000000000400000000000000000000  \
\x00\x02\x00\x00\x00\x08\x00\x01VIT_STATVital status                            \
$       \x00\x05\x00\x00\x00\x00\x00\x00        \x00\x00\x00\x00\x00\x00\x00\x00\
\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\
\x00\x02\x00\x00\x00\x08\x00\x02ECON    Economic status                         \
$CHAR   \x00\x04\x00\x00\x00\x01\x00\x00        \x00\x00\x00\x00\x00\x00\x00\x08\
\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\
\x00\x01\x00\x00\x00\x08\x00\x03COUNT   Count                                   \
COMMA   \x00\x08\x00\x00\x00\x00\x00\x00        \x00\x00\x00\x00\x00\x00\x00\x10\
\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\
\x00\x01\x00\x00\x00\x08\x00\x04TEMP    Temperature                             \
        \x00\x08\x00\x01\x00\x00\x00\x00        \x00\x00\x00\x00\x00\x00\x00\x18\
\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\
HEADER RECORD*******OBS     HEADER RECORD!!!!!!!000000000000000000000000000000  \
ALIVE   POOR    CL\x00\x00\x00\x00\x00\x00Bb\x99\x99\x99\x99\x99\x98\
ALIVE   NOT     Cn\x10\x00\x00\x00\x00\x00B_fffffh\
ALIVE   UNK     C\x9dP\x00\x00\x00\x00\x00BV\xb333334\
DEAD    POOR    B\xfe\x00\x00\x00\x00\x00\x00B]fffffh\
DEAD    NOT     B<\x00\x00\x00\x00\x00\x00Bg\x80\x00\x00\x00\x00\x00\
DEAD    UNK     B\x89\x00\x00\x00\x00\x00\x00B8\xb333334\
                                                \
'''


@pytest.fixture(scope='session')
def library_header_bytestring(library_bytestring):
    """
    First 3 lines of the file.
    """
    return library_bytestring[:80 * 3]


@pytest.fixture(scope='session')
def member_header_bytestring(library_bytestring):
    """
    Member header lines, namestrs, and the observation header.
    """
    return library_bytestring[80 * 3:80 * 3 + 80 * 5 + 140 * 4 + 80 * 1]


@pytest.fixture(scope='session')
def namestr_bytestring(member_header_bytestring):
    """
    Namestrs start after 5 header lines and are 140 bytes long.
    """
    index = 80 * 5
    return member_header_bytestring[index:index + 140]


@pytest.fixture(scope='session')
def observations_bytestring(library_bytestring):
    """
    Observations are streamed in the file after the member header.
    """
    return library_bytestring[80 * 3 + 80 * 5 + 140 * 4 + 80 * 1:]


@pytest.fixture(scope='session')  # Take care not to mutate!
def dataset():
    """
    The expected decoding of the example dataset.
    """
    created = datetime(2015, 11, 13, 10, 35, 8)
    fields = [
        xptview.Field(
            name='VIT_STAT',
            vtype=xptview.VariableType.CHARACTER,
            length=8,
            position=0,
            label='Vital status',
            number=1,
            format=xptview.Format('$', 5, 0),
            informat=xptview.Informat(),
        ),
        xptview.Field(
            name='ECON',
            vtype=xptview.VariableType.CHARACTER,
            length=8,
            position=8,
            label='Economic status',
            number=2,
            format=xptview.Format('$CHAR', 4, 0, xptview.FormatAlignment.RIGHT),
            informat=xptview.Informat(),
        ),
        xptview.Field(
            name='COUNT',
            vtype=xptview.VariableType.NUMERIC,
            length=8,
            position=16,
            label='Count',
            number=3,
            format=xptview.Format('COMMA', 8, 0),
            informat=xptview.Informat(),
        ),
        xptview.Field(
            name='TEMP',
            vtype=xptview.VariableType.NUMERIC,
            length=8,
            position=24,
            label='Temperature',
            number=4,
            format=xptview.Format('', 8, 1),
            informat=xptview.Informat(),
        ),
    ]
    columns = {
        'VIT_STAT': ['ALIVE'] * 3 + ['DEAD'] * 3,
        'ECON': ['POOR', 'NOT', 'UNK'] * 2,
        'COUNT': [1216.0, 1761.0, 2517.0, 254.0, 60.0, 137.0],
        'TEMP': [98.6, 95.4, 86.7, 93.4, 103.5, 56.7],
    }
    rows = [dict(zip(columns, values)) for values in zip(*columns.values())]
    return xptview.Dataset(
        name='ECON',
        fields=fields,
        rows=rows,
        observation_count=6,
        label='Blank-padded dataset label',
        dataset_type='',
        created=created,
        modified=created,
    )
