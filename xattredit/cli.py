#!/usr/bin/env python
# coding=utf-8
# vim: set ts=4 sw=4 expandtab syntax=python:
"""

xattredit.cli
Command-line interface & arg parsing

@author   Jacob Hipps <jacob@ycnrg.org>
@repo     https://git.ycnrg.org/projects/YXB/repos/yc_xattredit

Copyright (c) 2013-2017 J. Hipps / Neo-Retro Group, Inc.
https://ycnrg.org/

"""

import sys
import optparse

from xattredit import __version__, __date__, defaults
from xattredit.common.logthis import *
from xattredit.common import rcfile
from xattredit import dump, backend, editor

oparser = None

def show_banner():
    """
    Display banner
    """
    print("", file=sys.stderr)
    print(C.CYN, "*** ", C.WHT, "XAttrEdit", C.OFF, file=sys.stderr)
    print(C.CYN, "*** ", C.CYN, "Version", __version__, "(" + __date__ + ")", C.OFF, file=sys.stderr)
    print(C.CYN, "*** ", C.GRN, "Copyright (c) 2013-2017 Jacob Hipps <jacob@ycnrg.org>", C.OFF, file=sys.stderr)
    print(C.CYN, "*** ", C.YEL, "https://ycnrg.org/", C.OFF, file=sys.stderr)
    print("", file=sys.stderr)

def parse_cli(argv=None):
    """
    Parse command-line options
    """
    global oparser
    oparser = optparse.OptionParser(usage="%prog <--show|--get|--set|--remove|--edit|--restore> [options] PATH...", version=__version__+" ("+__date__+")")

    # General options
    oparser.add_option('-v', '--verbose', action="count", dest="run.verbose", help="Increase logging verbosity (-v Verbose, -vv Debug, -vvv Debug2)")
    oparser.add_option('-q', '--quiet', action="store_true", dest="run.quiet", help="Silence all log output except critial errors")
    oparser.add_option('-L', '--loglevel', action="store", dest="core.loglevel", default=False, metavar="NUM", help="Logging output verbosity (4=error,5=warning,6=info,7=verbose,8=debug,9=debug2)")
    oparser.add_option('-c', '--config', action="store", dest="run.config", default=False, metavar="PATH", help="Load configuration from PATH")
    oparser.add_option('-b', '--backend', action="store", dest="core.backend", default=False, metavar="NAME", help="Attribute backend [tool,xattr] (default=tool)")
    oparser.add_option('--nocolor', action="store_true", dest="run.nocolor", default=False, help="Disable colored output")

    # Mode selection options
    opg_mode = optparse.OptionGroup(oparser, "Mode Selection", "Choose operations mode (required). These options are mutually-exclusive.")
    opg_mode.add_option('--show', action="store_const", dest="run.mode", const="show", default=False, help="Dump attributes of PATH(s)")
    opg_mode.add_option('--get', action="store_const", dest="run.mode", const="get", default=False, help="Print a single attribute value (requires --name)")
    opg_mode.add_option('--set', action="store_const", dest="run.mode", const="set", default=False, help="Set a single attribute (requires --name and --value)")
    opg_mode.add_option('--remove', action="store_const", dest="run.mode", const="remove", default=False, help="Remove a single attribute (requires --name)")
    opg_mode.add_option('-e', '--edit', action="store_const", dest="run.mode", const="edit", default=False, help="Edit attributes of PATH, apply changes on save")
    opg_mode.add_option('--restore', action="store", dest="run.infile", default=False, metavar="DUMPFILE", help="Restore attributes from DUMPFILE ('-' for stdin)")

    # Attribute options
    opg_attr = optparse.OptionGroup(oparser, "Attributes", "Options for single-attribute modes")
    opg_attr.add_option('-n', '--name', action="store", dest="run.name", default=False, metavar="NAME", help="Attribute name (eg. user.comment)")
    opg_attr.add_option('-V', '--value', action="store", dest="run.value", default=False, metavar="VALUE", help="Attribute value; prefix with 0x for hex or 0s for base64, or quote")
    opg_attr.add_option('-m', '--match', action="store", dest="tools.match", default=False, metavar="REGEX", help="Only include attributes with names matching REGEX ('-' for all)")

    # Editing options
    opg_edit = optparse.OptionGroup(oparser, "Editing", "Options for --edit mode")
    opg_edit.add_option('--editor', action="store", dest="editor.command", default=False, metavar="CMD", help="Editor command (default=$VISUAL, $EDITOR, vi)")
    opg_edit.add_option('--from', action="store", dest="run.edited", default=False, metavar="FILE", help="Read edited dump from FILE ('-' for stdin) instead of launching an editor")

    # Tool options
    opg_tools = optparse.OptionGroup(oparser, "Tools", "Locations of external utilities used by the 'tool' backend")
    opg_tools.add_option('--getfattr', action="store", dest="tools.getfattr", default=False, metavar="PATH", help="Path to getfattr (default=auto)")
    opg_tools.add_option('--setfattr', action="store", dest="tools.setfattr", default=False, metavar="PATH", help="Path to setfattr (default=auto)")

    # add groups to parser
    oparser.add_option_group(opg_mode)
    oparser.add_option_group(opg_attr)
    oparser.add_option_group(opg_edit)
    oparser.add_option_group(opg_tools)

    options, args = oparser.parse_args(sys.argv[1:] if argv is None else argv)
    vout = vars(options)

    vout['run.paths'] = args
    if vout['run.infile']:
        vout['run.mode'] = "restore"

    if vout['run.verbose']:
        vout['run.verbose'] += 6
        vout['core.loglevel'] = vout['run.verbose']
    if vout['run.verbose'] or vout['core.loglevel']:
        vout['core.loglevel'] = int(vout['core.loglevel'])
        loglevel(vout['core.loglevel'])
    if vout['run.quiet']:
        vout['core.loglevel'] = LL.ERROR
        loglevel(vout['core.loglevel'])

    return vout


def do_show(xconfig, xb):
    """
    Dump attributes for all paths to stdout
    """
    dtext = dump.serialize_dump(xb.get_attributes(xconfig.run['paths']))
    if xconfig.core['color'] and sys.stdout.isatty():
        dtext = dump.highlight(dtext)
    sys.stdout.write(dtext)
    return 0

def do_get(xconfig, xb):
    for tpath in xconfig.run['paths']:
        print(xb.get_attribute(tpath, xconfig.run['name']))
    return 0

def do_set(xconfig, xb):
    for tpath in xconfig.run['paths']:
        xb.set_attribute(tpath, xconfig.run['name'], xconfig.run['value'])
    logthis("Attribute set OK.", ccode=C.GRN, loglevel=LL.INFO)
    return 0

def do_remove(xconfig, xb):
    for tpath in xconfig.run['paths']:
        xb.remove_attribute(tpath, xconfig.run['name'])
    logthis("Attribute removed.", ccode=C.GRN, loglevel=LL.INFO)
    return 0

def do_edit(xconfig, xb):
    if len(xconfig.run['paths']) != 1:
        failwith(ER.OPT_BAD, "--edit takes exactly one PATH")
    oplist = editor.edit_file(xconfig.run['paths'][0], xb, xconfig)
    if oplist is not None:
        logthis("Attributes saved.", ccode=C.GRN, loglevel=LL.INFO)
    return 0

def do_restore(xconfig, xb):
    dtext = editor.read_edited(xconfig.run['infile'])
    # validate before touching any file
    records = dump.parse(dtext)
    xb.restore_from_dump(dtext)
    logthis("Restored attributes for %d file(s)." % (len(records)), ccode=C.GRN, loglevel=LL.INFO)
    return 0

# mode => (handler, needs paths, needs name, needs value)
modes = {
            'show': (do_show, True, False, False),
            'get': (do_get, True, True, False),
            'set': (do_set, True, True, True),
            'remove': (do_remove, True, True, False),
            'edit': (do_edit, True, False, False),
            'restore': (do_restore, False, False, False)
        }

def run(config):
    """
    Dispatch to the selected mode; returns the exit code
    """
    mode = config.run['mode']
    if mode not in modes:
        if oparser:
            oparser.print_help()
        return 250

    handler, needpath, needname, needval = modes[mode]
    try:
        if needpath and not config.run['paths']:
            failwith(ER.OPT_MISSING, "No PATH specified")
        if needname and not config.run['name']:
            failwith(ER.OPT_MISSING, "--%s requires --name" % (mode))
        if needval and config.run['value'] is None:
            failwith(ER.OPT_MISSING, "--%s requires --value" % (mode))
        xb = backend.get_backend(config)
        return handler(config, xb)
    except AttributeNotFound as e:
        logthis(str(e), loglevel=LL.ERROR)
        return e.etype
    except (MalformedDump, ExternalToolError) as e:
        logexc(e, "%s failed" % (mode))
        return e.etype
    except xeError as e:
        return e.etype

def apply_overrides(config, xopt):
    """
    Apply cli options that merge() skips because they are falsy
    """
    if xopt['run.nocolor']:
        config.core['color'] = False
    if xopt['run.edited']:
        config.editor['hook'] = False
    # an empty --value is still a value
    if xopt['run.value'] is not False:
        config.run['value'] = xopt['run.value']
    return config


##############################################################################
## Entry point
##
def _main():
    """CLI entry point"""
    # Show banner
    if len(sys.argv) < 2 or sys.argv[1] == '-h' or sys.argv[1] == '--help':
        show_banner()

    # Set default loglevel
    loglevel(defaults['core']['loglevel'])

    # parse CLI options and load running config
    xopt = parse_cli()
    config = rcfile.loadConfig(xtraConf=xopt.pop('run.config'), cliopts=xopt)
    apply_overrides(config, xopt)
    configure_logging(config)

    # Ready
    logthis("Configuration done. config =", suffix=str(config), loglevel=LL.DEBUG)

    # Set quiet exception handler for non-verbose operation
    if config.core['loglevel'] < LL.VERBOSE:
        sys.excepthook = exceptionHandler

    sys.exit(run(config))

if __name__ == '__main__':
    _main()
