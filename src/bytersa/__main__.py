"""The Command Line Interface for the utility, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface) that asks for whatever the command
line left out, unless running non-interactively. The `demo` subcommand is the classic console loop: read a line,
generate a fresh key pair, print the keys, the ciphertext and the decrypted text, repeat until end of input.

Typical usage example:

    bytersa
    OR
    python -m bytersa demo
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import pathlib
import sys
import typing

import bytersa
from bytersa import arith
from bytersa import keygen
from bytersa import primes
from bytersa import rsa


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in bytersa.",
            choices=["keygen", "encrypt", "decrypt", "demo"],
        ),
    "keygen":
        HelpData("Key generation utility."),
    "encrypt":
        HelpData("Encryption utility."),
    "decrypt":
        HelpData("Decryption utility."),
    "demo":
        HelpData("Encrypt and decrypt lines read from the console with a fresh key pair each."),
    "public_key":
        HelpData(
            description="Location of the public key file.",
            format=pathlib.Path,
        ),
    "private_key":
        HelpData(
            description="Location of the private key file.",
            format=pathlib.Path,
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "encoding":
        HelpData(description="Payload encoding.", choices=["utf-8", "utf-16", "ascii"], advanced=True, default="utf-8"),
    "pool":
        HelpData(description="Prime pool to draw from.", choices=["table", "random"], advanced=True, default="table"),
    "table":
        HelpData("The fixed table of small primes up to 151."),
    "random":
        HelpData("Fresh random primes of the requested bit length."),
    "bits":
        HelpData(
            description="Bit length of primes drawn by the random pool.",
            format=int,
            advanced=True,
            default=10,
        ),
    "overwrite":
        HelpData(
            description="Overwrite specified destination files if they exist?",
            choices=["Y", "N"],
            default="N",
        )
}

needs = {
    "keygen": ("public_key", "private_key", "pool", "bits"),
    "encrypt": ("public_key", "message", "encoding"),
    "decrypt": ("private_key", "message", "encoding"),
    "demo": ("pool", "bits", "encoding"),
}

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=help_dict["public_key"].format, help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key",
                     "-P",
                     type=help_dict["private_key"].format,
                     help=help_dict["private_key"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", type=help_dict["message"].format, help=help_dict["message"].description)
encp = argparse.ArgumentParser(add_help=False)
encp.add_argument("--encoding", "-e", choices=help_dict["encoding"].choices, help=help_dict["encoding"].description)
poolp = argparse.ArgumentParser(add_help=False)
poolp.add_argument("--pool", choices=help_dict["pool"].choices, help=help_dict["pool"].description)
poolp.add_argument("--bits", type=help_dict["bits"].format, help=help_dict["bits"].description)
poolp.add_argument("--fast-inverse",
                   "-f",
                   action="store_true",
                   help="Find the private exponent with the extended Euclidean algorithm instead of a linear scan.")
widthp = argparse.ArgumentParser(add_help=False)
widthp.add_argument("--bigint",
                    "-b",
                    action="store_true",
                    help="Use arbitrary-precision ciphertext units and their DER wire form.")
corep = argparse.ArgumentParser(prog="bytersa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {bytersa.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
corep.add_argument("--log-level",
                   default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging verbosity.")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen_cmd = commands.add_parser("keygen", parents=[privkey, pubkey, poolp], help=help_dict["keygen"].description)
keygen_cmd.add_argument("--overwrite", "-o", action="store_const", const="Y", help=help_dict["overwrite"].description)
encrypt_cmd = commands.add_parser("encrypt",
                                  parents=[pubkey, payloads, encp, widthp],
                                  help=help_dict["encrypt"].description)
decrypt_cmd = commands.add_parser("decrypt",
                                  parents=[privkey, payloads, encp, widthp],
                                  help=help_dict["decrypt"].description)
demo_cmd = commands.add_parser("demo", parents=[poolp, encp, widthp], help=help_dict["demo"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    choices = helper_data.choices
    vald = set(choices)
    for choice in choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        ch = input(f"{arg}: ")
        if ch in vald:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if not ch and helper_data.default is not None:
            return helper_data.default
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def check_message(mess: str, enc) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        mess = mess[2:]
        with open(mess, "r", encoding=enc) as f:
            mess = f.read()
    return mess


def make_pool(args: argparse.Namespace) -> primes.PrimePool:
    if args.pool == "random":
        return primes.RandomPrimePool(int(args.bits))
    return primes.TablePrimePool(primes.DEFAULT_PRIMES)


def make_pair(args: argparse.Namespace, pool: primes.PrimePool) -> keygen.KeyPair:
    inverse = arith.mod_inverse_eea if args.fast_inverse else arith.mod_inverse
    return keygen.generate_key_pair(pool, inverse=inverse)


def demo(args: argparse.Namespace, prntr: typing.Callable = print) -> None:
    """Console loop, runs until end of input."""
    pool = make_pool(args)
    while True:
        try:
            message = input("Write a message to encrypt: ")
        except EOFError:
            return
        pair = make_pair(args, pool)
        prntr(f"Public key : {pair.public}")
        prntr(f"Private key: {pair.private}")
        ciph = rsa.encrypt_text(message, pair.public, args.encoding, args.bigint)
        clear = rsa.decrypt_text(ciph, pair.private, args.encoding, args.bigint)
        prntr(f"Encrypted message: {ciph}")
        prntr(f"Decrypted message: {clear}")
        prntr("")


def main(argv: list[str] | None = None):
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to bytersa!\n")
    if not args.subcommand:
        args.subcommand = choice_handler("subcommand", pstatus)
        # Subcommand flags were never parsed, pick their defaults.
        args.fast_inverse = getattr(args, "fast_inverse", False)
        args.bigint = getattr(args, "bigint", False)
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            if help_dict[reqs].choices is not None:
                res = choice_handler(reqs, pstatus)
            else:
                res = input_handler(reqs, pstatus)
            setattr(args, reqs, res)
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    match args.subcommand:
        case "keygen":
            if args.private_key.exists() or args.public_key.exists():
                rs = getattr(args, "overwrite", None)
                if rs is None:
                    rs = choice_handler("overwrite", pstatus, pspr)
                if rs == "N":
                    print("Destination private or public key already exists!")
                    return
            pair = make_pair(args, make_pool(args))
            pair.private.export(args.private_key, private=True)
            pair.public.export(args.public_key)
            pspr("\nKey pair generated!")
        case "encrypt":
            args.message = check_message(args.message, args.encoding)
            rpu = rsa.Key.import_key(args.public_key)
            ciph = rsa.encrypt_text(args.message, rpu, args.encoding, args.bigint)
            pspr("Ciphertext:")
            print(ciph)
        case "decrypt":
            args.message = check_message(args.message, "ascii")
            rpk = rsa.Key.import_key(args.private_key, private=True)
            try:
                clear = rsa.decrypt_text(args.message.strip(), rpk, args.encoding, args.bigint)
            except ValueError as exc:
                print(f"Decryption Failed! {exc}")
                sys.exit(1)
            pspr("Cleartext:")
            print(clear)
        case "demo":
            demo(args)
    pspr("Thank you for using bytersa!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
