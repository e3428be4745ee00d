import io
import pathlib
import subprocess
import sys

from hypothesis import given, settings, strategies as st

from bencodex import BencodexError, decode, encode, equal, load
from bencodex import jsonrepr

ROOT = pathlib.Path(__file__).resolve().parents[2]

# Any Bencodex value. st.text() never yields lone surrogates, so every text is encodable.
keys = st.one_of(st.binary(max_size=8), st.text(max_size=8))
values = st.recursive(
    st.one_of(
        st.none(),
        st.booleans(),
        st.integers(),
        st.integers(min_value=-(10 ** 60), max_value=10 ** 60),
        st.binary(max_size=24),
        st.text(max_size=24),
    ),
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(keys, children, max_size=4),
    ),
    max_leaves=24,
)


def run_cli(args, input_bytes=None):
    p = subprocess.run([sys.executable, "-m", "bencodex", *args], input=input_bytes,
                       capture_output=True, cwd=ROOT)
    return p.returncode, p.stdout, p.stderr


@given(values)
@settings(max_examples=300, deadline=None)
def test_decode_of_encode_is_structurally_equal(v):
    assert equal(decode(encode(v)), v)


@given(values)
@settings(max_examples=300, deadline=None)
def test_encoding_is_a_fixed_point(v):
    b = encode(v)
    assert encode(decode(b, strict=True)) == b


@given(st.dictionaries(keys, values, max_size=6), st.randoms(use_true_random=False))
@settings(max_examples=200, deadline=None)
def test_insertion_order_does_not_matter(d, rnd):
    items = list(d.items())
    rnd.shuffle(items)
    assert encode(dict(items)) == encode(d)


@given(values)
@settings(max_examples=200, deadline=None)
def test_stream_and_buffer_decoders_agree(v):
    b = encode(v)
    fp = io.BytesIO(b + b"tail")
    assert equal(load(fp), decode(b))
    assert fp.read() == b"tail"


@given(values, st.data())
@settings(max_examples=200, deadline=None)
def test_every_proper_prefix_is_rejected(v, data):
    b = encode(v)
    cut = data.draw(st.integers(min_value=0, max_value=len(b) - 1))
    try:
        decode(b[:cut])
    except BencodexError:
        return
    raise AssertionError(f"prefix {b[:cut]!r} of {b!r} decoded")


@given(values)
@settings(max_examples=25, deadline=None)
def test_cli_encode_matches_library(v):
    rc, out, err = run_cli(["encode", "-"], input_bytes=jsonrepr.dumps(v).encode("utf-8"))
    assert rc == 0, err.decode("utf-8", "ignore")
    assert out == encode(v)

    # and back: CLI decode -> JSON representation -> same value
    rc, out, err = run_cli(["decode", "-"], input_bytes=out)
    assert rc == 0, err.decode("utf-8", "ignore")
    assert equal(jsonrepr.loads(out.decode("utf-8")), v)
