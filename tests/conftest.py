# tests/conftest.py
import pytest

from recordconv.config import ConversionOptions


SAMPLE_PRN = (
    "Name            Address               Postcode Phone         Credit Limit Birthday\n"
    "Johnson, John   Voorstraat 32         3122gg   020 3849381        1000000 19870101\n"
    "Anderson, Paul  Dorpsplein 3A         4532 AA  030 3458986       10909300 19651203\n"
    "Wicket, Steve   Mendelssohnstraat 54d 3423 ba  0313-398475          93400 19640603\n"
    "Benetar, Pat    Driehoog 3zwart       2340 CC  06-28938945           5400 19640904\n"
    "Gibson, Mal     Vredenburg 21         3209 DD  06-48958986           5450 19781109\n"
    "Friendly, User  Sint Jansstraat 32    4220 EE  0885-291029           6360 19800810\n"
    "Smith, John     Børkestraße 32        87823    +44 728 889838      989830 19990920"
)

SAMPLE_CSV = (
    "Name,Address,Postcode,Phone,Credit Limit,Birthday\n"
    '"Johnson, John",Voorstraat 32,3122gg,020 3849381,10000,01/01/1987\n'
    '"Anderson, Paul",Dorpsplein 3A,4532 AA,030 3458986,109093,03/12/1965\n'
    '"Wicket, Steve",Mendelssohnstraat 54d,3423 ba,0313-398475,934,03/06/1964\n'
    '"Benetar, Pat",Driehoog 3zwart,2340 CC,06-28938945,54,04/09/1964\n'
    '"Gibson, Mal",Vredenburg 21,3209 DD,06-48958986,54.5,09/11/1978\n'
    '"Friendly, User",Sint Jansstraat 32,4220 EE,0885-291029,63.6,10/08/1980\n'
    '"Smith, John",Børkestraße 32,87823,+44 728 889838,9898.3,20/09/1999'
)

# Same seven people, third one without a phone number.
SAMPLE_PRN_NO_PHONE_3 = SAMPLE_PRN.replace("0313-398475", " " * len("0313-398475"))
SAMPLE_CSV_NO_PHONE_3 = SAMPLE_CSV.replace("0313-398475", "")

EXPECTED_RECORDS = [
    {"Name": "Johnson, John", "Address": "Voorstraat 32", "Postcode": "3122GG",
     "Phone": "0203849381", "Credit Limit": "10000.00", "Birthday": "1987-01-01"},
    {"Name": "Anderson, Paul", "Address": "Dorpsplein 3A", "Postcode": "4532AA",
     "Phone": "0303458986", "Credit Limit": "109093.00", "Birthday": "1965-12-03"},
    {"Name": "Wicket, Steve", "Address": "Mendelssohnstraat 54d", "Postcode": "3423BA",
     "Phone": "0313398475", "Credit Limit": "934.00", "Birthday": "1964-06-03"},
    {"Name": "Benetar, Pat", "Address": "Driehoog 3zwart", "Postcode": "2340CC",
     "Phone": "0628938945", "Credit Limit": "54.00", "Birthday": "1964-09-04"},
    {"Name": "Gibson, Mal", "Address": "Vredenburg 21", "Postcode": "3209DD",
     "Phone": "0648958986", "Credit Limit": "54.50", "Birthday": "1978-11-09"},
    {"Name": "Friendly, User", "Address": "Sint Jansstraat 32", "Postcode": "4220EE",
     "Phone": "0885291029", "Credit Limit": "63.60", "Birthday": "1980-08-10"},
    {"Name": "Smith, John", "Address": "Børkestraße 32", "Postcode": "87823",
     "Phone": "+44728889838", "Credit Limit": "9898.30", "Birthday": "1999-09-20"},
]


def chunked(data: bytes, size: int):
    return [data[i:i + size] for i in range(0, len(data), size)]


@pytest.fixture
def sample_prn():
    return SAMPLE_PRN


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def expected_records():
    return [dict(r) for r in EXPECTED_RECORDS]


@pytest.fixture
def utf8_options():
    def _make(input_type, output_type="json", **kwargs):
        return ConversionOptions(input_type=input_type, output_type=output_type, encoding="utf-8", **kwargs)
    return _make
