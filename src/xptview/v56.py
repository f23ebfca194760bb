"""
Decode the SAS XPORT/XPT file format from SAS Version 5 or 6.

The SAS V5 Transport File format, also called XPORT, or simply XPT, is a
sequence of 80-byte records: a library header, then for each member
dataset a member header, variable descriptors (NAMESTR records), and
observations.
"""

# All "records" are 80 bytes long, padded if necessary.
# Character data are ASCII-encoded.
# Integer data are big-endian.
# Floating point data are IBM-style double format.

# Standard Library
import logging
import math
import pathlib
import re
import string
import struct
import warnings
from datetime import datetime

# Xptview Modules
import xptview
from xptview import (
    InvalidFieldDescriptor,
    InvalidHeader,
    InvalidMember,
    RowLayoutError,
    TruncatedRecord,
)

__all__ = [
    'load',
    'loads',
    'parse',
    'read',
]

LOG = logging.getLogger(__name__)

RECORD_SIZE = 80
PREVIEW_ROWS = 100
TEXT_DATA_ENCODING = 'ISO-8859-1'
TEXT_METADATA_ENCODING = 'ascii'

MEMBER_MARKER = b'HEADER RECORD*******MEMBER  HEADER RECORD!!!!!!!'

# SAS writes a missing value as an IBM zero-fraction with a tag in the
# exponent byte: "." by default, or "A" to "Z" and "_" for the 27
# special missing values.
MISSING_VALUES = {ord(c): c for c in '._' + string.ascii_uppercase}

MAX_LENGTHS = {
    xptview.VariableType.NUMERIC: 8,
    xptview.VariableType.CHARACTER: 200,
}


class RecordReader:
    """
    Fixed-size record windows over an XPORT-format byte string.

    The reader keeps a cursor for sequential access but never
    interprets the bytes it returns.
    """

    def __init__(self, bytestring, record_size=RECORD_SIZE):
        """
        Initialize a reader positioned at the start of ``bytestring``.
        """
        self.bytestring = bytes(bytestring)
        self.mview = memoryview(self.bytestring)
        self.record_size = record_size
        self.cursor = 0

    def __repr__(self):
        """
        REPL-format string.
        """
        fmt = '<{cls} at {cursor} of {n} bytes>'
        return fmt.format(cls=type(self).__name__, cursor=self.cursor, n=len(self.bytestring))

    def tell(self):
        """
        Get the cursor's byte offset.
        """
        return self.cursor

    def seek(self, offset):
        """
        Move the cursor to a byte offset.
        """
        if not 0 <= offset <= len(self.bytestring):
            raise ValueError(f'Offset {offset} outside of {len(self.bytestring)} bytes')
        self.cursor = offset

    def bytes_remaining(self):
        """
        Count the bytes after the cursor.
        """
        return len(self.bytestring) - self.cursor

    def read_record(self, offset=None):
        """
        Get one record.

        With an ``offset``, read at that position and leave the cursor
        alone.  Otherwise read at the cursor and advance it.
        """
        if offset is not None:
            return self._window(offset, self.record_size).tobytes()
        record = self._window(self.cursor, self.record_size).tobytes()
        self.cursor += self.record_size
        return record

    def read(self, size):
        """
        Get ``size`` bytes at the cursor, without copying, and advance.
        """
        chunk = self._window(self.cursor, size)
        self.cursor += size
        return chunk

    def _window(self, offset, size):
        chunk = self.mview[offset:offset + size]
        if len(chunk) != size:
            raise TruncatedRecord(
                f'Expected {size} bytes, but only {len(chunk)} remain',
                offset,
            )
        return chunk


class LibraryHeader:
    """
    Library metadata from a SAS Version 5 or 6 Transport (XPORT) file.
    """

    # 1. The first header record:
    #
    #   HEADER RECORD*******LIBRARY HEADER RECORD!!!!!!!
    #   000000000000000000000000000000
    #
    # 2. The first real header record ... as a C structure:
    #
    #   struct REAL_HEADER {
    #      char sas_symbol[2][8];       /* "SAS", twice             */
    #      char saslib[8];              /* "SASLIB"                 */
    #      char sasver[8];              /* version of SAS used      */
    #      char sas_os[8];              /* operating system used    */
    #      char blanks[24];
    #      char sas_create[16];         /* datetime created         */
    #      };
    #
    # 3. Second real header record
    #
    #       ddMMMyy:hh:mm:ss
    #
    #    In this record, the string is the datetime modified. Most
    #    often, the datetime created and datetime modified will always
    #    be the same. Pad with ASCII blanks to 80 bytes. Note that only
    #    a 2-digit year appears. If any program needs to read in this
    #    2-digit year, be prepared to deal with dates in the 1900s or
    #    the 2000s.

    marker = re.compile(rb'HEADER RECORD\*{7}(?P<kind>LIBRARY|LIBV8  ) HEADER RECORD\!{7}0{30} {2}')
    pattern = re.compile(
        rb'SAS {5}SAS {5}SASLIB {2}'
        rb'(?P<version>.{8})(?P<os>.{8}).{24}(?P<created>.{16})',
        re.DOTALL,
    )

    def __init__(self, sas_version='', sas_os='', created=None, modified=None):
        """
        Initialize a ``LibraryHeader``.
        """
        self.sas_version = sas_version
        self.sas_os = sas_os
        self.created = created
        self.modified = modified

    def __repr__(self):
        """
        REPL-format string.
        """
        metadata = ('sas_version', 'sas_os', 'created', 'modified')
        metadata = (f'{name}={getattr(self, name)!r}' for name in metadata)
        return f'<{type(self).__name__} {" ".join(metadata)}>'

    @classmethod
    def from_reader(cls, reader):
        """
        Validate and decode the library header records at the cursor.
        """
        LOG.debug(f'Decode {cls.__name__}')
        offset = reader.tell()
        record = reader.read_record()
        mo = cls.marker.match(record)
        if mo is None:
            LOG.error('Document begins with\n%s', record)
            raise InvalidHeader('Document does not match SAS Version 5 or 6 Transport (XPORT) format', offset)
        if mo['kind'] != b'LIBRARY':
            raise InvalidHeader('SAS Version 8 or 9 Transport (LIBV8) format is not supported', offset)

        offset = reader.tell()
        record = reader.read_record()
        mo = cls.pattern.match(record)
        if mo is None:
            LOG.error('Library header continues with\n%s', record)
            raise InvalidHeader('Library header lacks the SAS and SASLIB markers', offset)
        modified = reader.read_record()[:16]

        self = cls(
            sas_version=text_decode(mo['version']),
            sas_os=text_decode(mo['os']),
            created=strptime(mo['created']),
            modified=strptime(modified),
        )
        LOG.debug(f'Decoded {self!r}')
        return self


class Namestr:
    """
    Variable metadata from a SAS Version 5 or 6 Transport (XPORT) file.
    """

    # Here is the C structure definition for the namestr record:
    #
    # struct NAMESTR {
    #    short ntype;       /* VARIABLE TYPE: 1=NUMERIC, 2=CHAR       */
    #    short nhfun;       /* HASH OF NNAME (always 0)               */
    #    short nlng;        /* LENGTH OF VARIABLE IN OBSERVATION      */
    #    short nvar0;       /* VARNUM                                 */
    #    char8 nname;       /* NAME OF VARIABLE                       */
    #    char40 nlabel;     /* LABEL OF VARIABLE                      */
    #    char8 nform;       /* NAME OF FORMAT                         */
    #    short nfl;          /* FORMAT FIELD LENGTH OR 0               */
    #    short nfd;         /* FORMAT NUMBER OF DECIMALS              */
    #    short nfj;         /* 0=LEFT JUSTIFICATION, 1=RIGHT JUST     */
    #    char nfill[2];      /* (UNUSED, FOR ALIGNMENT AND FUTURE)     */
    #    char8 niform;      /* NAME OF INPUT FORMAT                   */
    #    short nifl;         /* INFORMAT LENGTH ATTRIBUTE              */
    #    short nifd;        /* INFORMAT NUMBER OF DECIMALS            */
    #    long npos;         /* POSITION OF VALUE IN OBSERVATION       */
    #    char rest[52];     /* remaining fields are irrelevant         */
    #    };
    #
    # Note that the length given in the last 4 bytes of the member
    # header record indicates the actual number of bytes for the NAMESTR
    # structure. The size of the structure listed above is 140 bytes.
    # Under VAX/VMS, the size will be 136 bytes, meaning that the 'rest'
    # variable may be truncated.

    fmts = {
        140: '>hhhh8s40s8shhh2s8shhl52s',
        136: '>hhhh8s40s8shhh2s8shhl48s',
    }

    @classmethod
    def unpack(cls, bytestring, index, offset=None, encoding=TEXT_DATA_ENCODING):
        """
        Decode the ``index``-th (from 1) namestr as an ``xptview.Field``.
        """
        tokens = struct.unpack(cls.fmts[len(bytestring)], bytestring)
        vtype, _, length, number, name, label = tokens[:6]
        position = tokens[14]

        try:
            vtype = xptview.VariableType(vtype)
        except ValueError:
            raise InvalidFieldDescriptor(
                f'Variable {index} has type {vtype}, expected 1 (numeric) or 2 (character)',
                offset,
            ) from None
        limit = MAX_LENGTHS[vtype]
        if not 0 < length <= limit:
            raise InvalidFieldDescriptor(
                f'Variable {index} has length {length}, expected 1 to {limit} for {vtype.name.lower()}',
                offset,
            )
        if position < 0:
            raise InvalidFieldDescriptor(f'Variable {index} has position {position}', offset)

        name = text_decode(name, encoding)
        if not name:
            name = f'VAR{index}'
            LOG.warning(f'Variable {index} has no name, using {name!r}')
        label = text_decode(label, encoding)
        return xptview.Field(
            name=name,
            vtype=vtype,
            length=length,
            position=position,
            label=label if label else None,
            number=number,
            format=xptview.Format.from_struct_tokens(*tokens[6:10]),
            informat=xptview.Informat.from_struct_tokens(*tokens[11:14]),
        )


class MemberHeader:
    """
    Dataset metadata from a SAS Version 5 or 6 Transport (XPORT) file.
    """

    # 4. Member header records
    #    Both of these records occur for every member in the file.
    #
    #    HEADER RECORD*******MEMBER HEADER RECORD!!!!!!!
    #    000000000000000001600000000140
    #    HEADER RECORD*******DSCRPTR HEADER RECORD!!!!!!!
    #    000000000000000000000000000000
    #
    #    Note the 0140 that appears in the member header record above.
    #    This value specifies the size of the variable descriptor
    #    (NAMESTR) record that is described later in this document. On
    #    the VAX/VMS operating system, the value will be 0136 instead of
    #    0140. This means that the descriptor will be only 136 bytes
    #    instead of 140.
    #
    # 5. Member header data ... as C structure:
    #
    #       struct REAL_HEADER {
    #          char sas_symbol[8];      /* "SAS"                    */
    #          char sas_dsname[8];      /* dataset name             */
    #          char sasdata[8];         /* "SASDATA"                */
    #          char sasver[8];          /* version of SAS used      */
    #          char sas_osname[8];      /* operating system used    */
    #          char blanks[24];
    #          char sas_create[16];     /* datetime created         */
    #          };
    #
    #    The second header record as C structure:
    #
    #       struct SECOND_HEADER {
    #          char dtmod[16];            /* date modified           */
    #          char padding[16];
    #          char dslabel[40];          /* dataset label          */
    #          char dstype[8]             /* dataset type           */
    #          };
    #
    # 6. Namestr header record
    #    One for each member
    #
    #       HEADER RECORD*******NAMESTR HEADER RECORD!!!!!!!
    #       000000xxxx0000000000000 0000000
    #
    #    In this header record, xxxx is the number of variables in the
    #    data set, displayed with blank-padded numeric characters. For
    #    example, for 2 variables, xxxx=0002.
    #
    # 7. Namestr records
    #    Each namestr field is 140 bytes long, but the fields are
    #    streamed together and broken in 80-byte pieces. If the last
    #    byte of the last namestr field does not fall in the last byte
    #    of the 80-byte record, the record is padded with ASCII blanks
    #    to 80 bytes.
    #
    # 8. Observation header
    #
    #       HEADER RECORD*******OBS HEADER RECORD!!!!!!!
    #       000000000000000000000000 000000

    patterns = {
        'member header': re.compile(
            rb'HEADER RECORD\*{7}MEMBER  HEADER RECORD\!{7}0{17}'
            rb'160{8}(?P<descriptor_size>140|136)  '
        ),
        'descriptor header': re.compile(
            rb'HEADER RECORD\*{7}DSCRPTR HEADER RECORD\!{7}0{30} {2}'
        ),
        'member descriptor': re.compile(
            rb'SAS {5}(?P<name>.{8})SASDATA '
            rb'(?P<version>.{8})(?P<os>.{8}).{24}(?P<created>.{16})',
            re.DOTALL,
        ),
        'member label': re.compile(
            rb'(?P<modified>.{16}).{16}(?P<label>.{40})(?P<type>.{8})',
            re.DOTALL,
        ),
        'namestr header': re.compile(
            rb'HEADER RECORD\*{7}NAMESTR HEADER RECORD\!{7}0{6}'
            rb'(?P<n_variables>.{4})0{20} {2}',
            re.DOTALL,
        ),
        'observation header': re.compile(
            rb'HEADER RECORD\*{7}OBS {5}HEADER RECORD\!{7}0{30} {2}'
        ),
    }

    def __init__(
        self,
        name,
        dataset_label=None,
        dataset_type='',
        created=None,
        modified=None,
        sas_os='',
        sas_version='',
        fields=(),
    ):
        """
        Initialize a ``MemberHeader``.
        """
        self.name = name
        self.dataset_label = dataset_label
        self.dataset_type = dataset_type
        self.created = created
        self.modified = modified
        self.sas_os = sas_os
        self.sas_version = sas_version
        self.fields = tuple(fields)

    def __repr__(self):
        """
        Format for the REPL.
        """
        metadata = ('name', 'dataset_label', 'dataset_type', 'created', 'modified')
        metadata = {name: getattr(self, name) for name in metadata}
        metadata = (f'{k.title()}: {v}' for k, v in metadata.items() if v is not None)
        return f'<{type(self).__name__} {", ".join(metadata)}>'

    @classmethod
    def from_reader(cls, reader, path='', encoding=TEXT_DATA_ENCODING):
        """
        Decode the member header records and namestrs at the cursor.

        Leaves the cursor at the first observation record.
        """
        LOG.debug(f'Decode {cls.__name__} at byte {reader.tell()}')

        def expect(what):
            offset = reader.tell()
            record = reader.read_record()
            mo = cls.patterns[what].match(record)
            if mo is None:
                raise InvalidMember(f'Expected {what} record, got {record[:48]!r}', offset)
            return mo

        descriptor_size = int(expect('member header')['descriptor_size'])
        if descriptor_size == 136:
            warnings.warn('File written on VAX/VMS, module behavior not tested')
        expect('descriptor header')
        first = expect('member descriptor')
        second = expect('member label')

        offset = reader.tell()
        mo = expect('namestr header')
        try:
            n = int(mo['n_variables'])
        except ValueError:
            raise InvalidMember(f'Invalid number of variables {mo["n_variables"]!r}', offset) from None
        if n < 0:
            raise InvalidMember(f'Invalid number of variables {mo["n_variables"]!r}', offset)

        size = n * descriptor_size
        if size % RECORD_SIZE:
            size += RECORD_SIZE - size % RECORD_SIZE
        start = reader.tell()
        block = reader.read(size)
        fields = []
        for i in range(n):
            chunk = block[i * descriptor_size:(i + 1) * descriptor_size]
            field = Namestr.unpack(chunk, i + 1, start + i * descriptor_size, encoding)
            fields.append(field)
        names = [f.name for f in fields]
        for i, name in enumerate(names):
            if name in names[:i]:
                raise InvalidFieldDescriptor(
                    f'Variable name {name!r} is not unique',
                    start + i * descriptor_size,
                )
        expect('observation header')

        name = text_decode(first['name'], encoding)
        if not name and path:
            name = pathlib.PurePath(path).stem
            LOG.warning(f'Member has no name, using {name!r}')
        label = text_decode(second['label'], encoding)
        self = cls(
            name=name,
            dataset_label=label if label else None,
            dataset_type=text_decode(second['type']),
            created=strptime(first['created']),
            modified=strptime(second['modified']),
            sas_os=text_decode(first['os']),
            sas_version=text_decode(first['version']),
            fields=fields,
        )
        LOG.debug(f'Decoded {self!r}')
        return self


class Observations:
    """
    Data from a SAS Version 5 or 6 Transport (XPORT) file.

    ``rows`` holds the decoded preview and ``count`` the number of
    observations in the member.
    """

    # 9. Data records
    #    Data records are streamed in the same way that namestrs are.
    #    There is ASCII blank padding at the end of the last record if
    #    necessary. There is no special trailing record.

    def __init__(self, rows=(), count=0):
        """
        Initialize from decoded rows and the total count.
        """
        self.rows = tuple(rows)
        self.count = count

    @classmethod
    def from_bytes(cls, bytestring, fields, offset=None, encoding=TEXT_DATA_ENCODING, preview=PREVIEW_ROWS):
        """
        Decode observations from an XPORT-format byte string.

        The byte string should span from the end of the observation
        header to the next member header or the end of the document.
        """
        LOG.debug(f'Decode {cls.__name__} from {len(bytestring)} bytes')
        stride = sum(f.length for f in fields)
        if stride == 0:
            raise RowLayoutError('Observations have zero length', offset)
        for f in fields:
            if f.position + f.length > stride:
                raise RowLayoutError(
                    f'Variable {f.name!r} spans bytes {f.position} to {f.position + f.length}'
                    f' of a {stride}-byte observation',
                    offset,
                )

        # Blank or null padding fills out the last record.  The format
        # can't distinguish an observation of only padding bytes from the
        # padding itself, so such observations inside the final partial
        # record are treated as padding.
        mview = memoryview(bytestring)
        count = len(mview) // stride
        while count and len(mview) - (count - 1) * stride < RECORD_SIZE:
            if mview[(count - 1) * stride:count * stride].tobytes().strip(b' \x00'):
                break
            count -= 1

        def character_decode(s):
            return s.tobytes().decode(encoding, errors='replace').rstrip(' \x00')

        converters = []
        for f in fields:
            if f.vtype == xptview.VariableType.NUMERIC:
                converters.append(ibm_to_ieee)
            else:
                converters.append(character_decode)

        rows = []
        for i in range(min(count, preview)):
            chunk = mview[i * stride:(i + 1) * stride]
            rows.append({
                f.name: convert(chunk[f.position:f.position + f.length])
                for f, convert in zip(fields, converters)
            })
        return cls(rows, count)


class Member(xptview.Dataset):
    """
    Dataset from a SAS Version 5 or 6 Transport (XPORT) file.
    """

    @classmethod
    def from_reader(cls, reader, path='', encoding=TEXT_DATA_ENCODING, preview=PREVIEW_ROWS):
        """
        Decode the member at the cursor, leaving the cursor at the next.
        """
        header = MemberHeader.from_reader(reader, path, encoding)
        start = reader.tell()
        end = find_member(reader.bytestring, start)
        block = reader.read(end - start)
        try:
            observations = Observations.from_bytes(block, header.fields, start, encoding, preview)
        except RowLayoutError:
            if header.fields:
                raise
            LOG.warning(f'Member {header.name!r} has no variables')
            observations = Observations()
        self = cls(
            name=header.name,
            fields=header.fields,
            rows=observations.rows,
            observation_count=observations.count,
            label=header.dataset_label,
            dataset_type=header.dataset_type,
            created=header.created,
            modified=header.modified,
        )
        LOG.info(f'Decoded XPORT dataset {self.name!r}')
        LOG.debug('%r', self)
        return self


class Library(xptview.XptFile):
    """
    Collection of datasets from a SAS Version 5 or 6 Transport file.
    """

    @classmethod
    def from_bytes(cls, bytestring, path='', encoding=TEXT_DATA_ENCODING, preview=PREVIEW_ROWS):
        """
        Parse a SAS XPORT document from a byte string.
        """
        LOG.debug(f'Decoding {cls.__name__} from {len(bytestring)} bytes')
        reader = RecordReader(bytestring)
        LibraryHeader.from_reader(reader)
        members = []
        while not exhausted(reader):
            members.append(Member.from_reader(reader, path, encoding, preview))
        self = cls(path=path, datasets=members)
        LOG.info(f'Decoded {self}')
        return self


def exhausted(reader):
    """
    Check whether only padding remains after the cursor.
    """
    if reader.bytes_remaining() < RECORD_SIZE:
        return True
    if reader.read_record(reader.tell()).strip(b' \x00'):
        return False
    return not reader.mview[reader.tell():].tobytes().strip(b' \x00')


def find_member(bytestring, start):
    """
    Find the next record-aligned member header at or after ``start``.

    Returns the length of ``bytestring`` if there is none.
    """
    i = bytestring.find(MEMBER_MARKER, start)
    while i != -1:
        if i % RECORD_SIZE == 0:
            return i
        i = bytestring.find(MEMBER_MARKER, i + 1)
    return len(bytestring)


def text_decode(bytestring, encoding=TEXT_METADATA_ENCODING):
    """
    Decode blank- or null-padded metadata text.

    Informational text that can't be decoded becomes an empty string.
    """
    try:
        return bytestring.strip(b'\x00').decode(encoding).strip()
    except UnicodeDecodeError:
        LOG.warning(f'Ignoring malformed text {bytestring!r}')
        return ''


def strptime(timestring):
    """
    Parse a datetime from an XPT format string.

    All text in an XPT document are ASCII-encoded.  This function
    expects a bytes string in the "ddMMMyy:hh:mm:ss" format.  For
    example, ``b'16FEB11:10:07:55'``.  Note that XPT supports only
    2-digit years, which are expected to be either 1900s or 2000s.
    Malformed timestamps are informational only, so they become
    ``None``.
    """
    try:
        return datetime.strptime(timestring.decode('ascii'), '%d%b%y:%H:%M:%S')
    except ValueError:
        LOG.warning(f'Ignoring malformed timestamp {timestring!r}')
        return None


def missing_value(ibm):
    """
    Get the SAS missing value tag, such as ``'.'`` or ``'A'``, or None.
    """
    ibm = bytes(ibm).ljust(8, b'\x00')
    if ibm[0] in MISSING_VALUES and not any(ibm[1:]):
        return MISSING_VALUES[ibm[0]]
    return None


def ibm_to_ieee(ibm):
    """
    Convert IBM-format floating point (bytes) to IEEE 754 64-bit (float).

    SAS missing values, including the special missing values ``.A``
    through ``.Z`` and ``._``, convert to ``None``.
    """
    # IBM mainframe:    sign * 0.mantissa * 16 ** (exponent - 64)
    # Python uses IEEE: sign * 1.mantissa * 2 ** (exponent - 1023)

    # Numerics shorter than 8 bytes keep the high-order bytes, so we
    # pad-out to 8 bytes.  We expect 2 to 8 bytes, but there's no need
    # to check; bizarre sizes will cause a struct module unpack error.
    ibm = bytes(ibm).ljust(8, b'\x00')

    # parse the 64 bits of IBM float as one 8-byte unsigned long long
    ulong, = struct.unpack('>Q', ibm)
    if ulong == 0:
        return 0.0

    # IBM: 1-bit sign, 7-bits exponent, 56-bits mantissa
    sign = ulong & 0x8000000000000000
    exponent = (ulong & 0x7f00000000000000) >> 56
    mantissa = ulong & 0x00ffffffffffffff

    # The IBM hexadecimal floating point format has no NaN, so SAS uses
    # alternative zero encodings for missing values.  Check those before
    # treating the bits as a number.
    if mantissa == 0 and ibm[0] in MISSING_VALUES:
        return None

    # The mantissa is a 56-bit fraction and the exponent is base 16, so
    # the magnitude is mantissa * 2 ** (4 * (exponent - 64) - 56).  The
    # IBM range, about 16 ** -65 to 16 ** 63, fits in an IEEE double, so
    # the only error is rounding the mantissa to 53 bits.
    magnitude = math.ldexp(mantissa, 4 * (exponent - 64) - 56)
    return -magnitude if sign else magnitude


def load(fp, **kwds):
    """
    Deserialize a SAS Transport v5 (XPT) file.

        >>> with open('example.xpt', 'rb') as f:
        ...     xpt = load(f)
    """
    try:
        bytestring = fp.read()
    except UnicodeDecodeError:
        raise TypeError(f'Expected a BufferedReader in bytes-mode, got {type(fp).__name__}')
    if not isinstance(bytestring, (bytes, bytearray)):
        raise TypeError(f'Expected a BufferedReader in bytes-mode, got {type(fp).__name__}')
    path = getattr(fp, 'name', '')
    return parse(bytestring, path if isinstance(path, str) else '', **kwds)


def loads(bytestring, path='', **kwds):
    """
    Deserialize a SAS Transport v5 (XPT) document from a byte string.

        >>> with open('example.xpt', 'rb') as f:
        ...     bytestring = f.read()
        >>> xpt = loads(bytestring)
    """
    return parse(bytestring, path, **kwds)


def read(path, **kwds):
    """
    Open, read, and decode a SAS Transport v5 (XPT) file.

    The file extension isn't trusted; the content is validated.
    """
    with open(path, 'rb') as f:
        bytestring = f.read()
    return parse(bytestring, str(path), **kwds)


def parse(bytestring, path='', encoding=TEXT_DATA_ENCODING, preview=PREVIEW_ROWS):
    """
    Decode a SAS Transport v5 (XPT) document into an ``xptview.XptFile``.

    Character data are decoded with ``encoding``.  At most ``preview``
    observations are decoded per dataset, while each dataset's
    ``observation_count`` is the true total.  Raises an
    ``xptview.XportError`` subclass, with the byte offset of the
    problem, for the first malformed structure.
    """
    return Library.from_bytes(bytestring, path, encoding, preview)
