# ordinals

Tools for ordinal theory: numbering satoshis, reading and writing their
notations, and pulling inscriptions out of raw transactions. The package
has no dependencies beyond the standard library.

## Install

    pip install .

For the test suite:

    pip install ".[test]"
    pytest

## Command line

Installing the package puts an `ordinals` command on your path. Every
subcommand prints its result as indented JSON to standard output. On an error
it prints `error: ...` to standard error and exits with status 1.

    ordinals parse nvtdijuwxlp
    ordinals parse "1°0′0″0‴"
    ordinals epochs
    ordinals decode transaction.bin
    ordinals decode < transaction.bin

- `parse OBJECT` reads an object in any notation it knows (a sat number,
  name, degree, decimal or percentile; an inscription id; an outpoint or
  satpoint; a 64-digit hex hash; a segwit address) and prints it as
  `{"object": ...}` in its canonical text form.
- `epochs` prints `{"starting_sats": [...]}`, the first sat of each reward
  epoch.
- `decode [TRANSACTION]` reads one consensus-encoded transaction from a file,
  or from standard input when no file is given, and prints
  `{"inscriptions": [...]}` with the inscriptions found in its witnesses.
  Body and content type are printed as lists of byte values.

## Library

```python
from ordinals.sat import Sat
from ordinals.rarity import Rarity

sat = Sat.parse("0°0′336″0‴")
print(int(sat), sat.name(), sat.degree(), sat.percentile())
assert sat.rarity() == Rarity.parse("epic")
```

`Sat` also offers `height()`, `epoch()`, `cycle()`, `period()`, `third()`,
`epoch_position()`, `decimal()` and `is_common()`; the module has
`subsidy(height)`, `starting_sat(height)` and `epoch_starting_sats()`.

Inscriptions can be built and read back:

```python
from ordinals.inscription import Inscription, parse_witness

inscription = Inscription(body=b"hello", content_type=b"text/plain;charset=utf-8")
assert parse_witness(inscription.to_witness()) == [inscription]
```

`Inscription.from_transaction(tx)` returns every inscription in a decoded
`Transaction` together with its input index and position in that input, and
`Inscription.from_file(path)` builds one from a file, choosing the content type
by extension (MP4 files must hold H.264 video).

Other modules:

- `ordinals.inscription_id`: `InscriptionId.parse`, raising subclasses of
  `ParseError` (`CharacterError`, `LengthError`, `SeparatorError`,
  `TxidError`, `InvalidIndexError`).
- `ordinals.sat_point`: `OutPoint` and `SatPoint`, with text forms and
  `SatPoint.encode` / `SatPoint.decode` for the 44-byte binary form.
- `ordinals.representation`: `Representation.detect` works out which notation
  a string uses.
- `ordinals.media`: `Media` kinds, `Media.parse` for content types and
  `content_type_for_path`.
- `ordinals.outgoing`: `Outgoing.parse` for amounts (such as `1.5 BTC` or
  `10sat`), inscription ids and satpoints.
- `ordinals.object`: `Object.parse`, covering every notation above, and
  `Address` for bech32/bech32m segwit addresses.
- `ordinals.script`: `ScriptBuilder` and `instructions` for building and
  reading scripts.
- `ordinals.transaction`: `Transaction.decode` / `Transaction.read` and
  `tapscript` for picking the script out of a witness.
- `ordinals.commands`: the functions behind the command line (`decode`,
  `epochs`, `parse_object`, `print_json`) and `list_ranges`, which describes
  the sat ranges of an output with their sizes, offsets, names and rarities.

## What this package does not do

It keeps no index and does not talk to a Bitcoin node. There are no commands
to find where a sat is, list the sats of an output from the chain, show index
statistics, run an explorer server or manage a wallet; `list_ranges` only
describes ranges that you supply.