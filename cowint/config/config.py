"""
A small tree of typed options.

An OptionDescription groups Options and nested descriptions; a Config
holds one value per option of a description.  to_optparse() turns a
config into command line switches that write straight into it.
"""

import optparse


class ConfigError(Exception):
    """Option values that are valid one by one but not together."""


class Config(object):

    def __init__(self, descr, **overrides):
        self._descr = descr
        for child in descr._children:
            if isinstance(child, OptionDescription):
                self.__dict__[child._name] = Config(child)
            else:
                self.__dict__[child._name] = child.default
        for path, value in overrides.items():
            subconfig, name = self._get_by_path(path)
            setattr(subconfig, name, value)

    def __setattr__(self, name, value):
        if name.startswith('_'):
            self.__dict__[name] = value
            return
        self.setoption(name, value)

    def setoption(self, name, value):
        child = getattr(self._descr, name, None)
        if not isinstance(child, Option):
            raise ValueError('unknown option %s' % (name,))
        child.setoption(self, value)

    def _get_by_path(self, path):
        """returns tuple (config, name)"""
        path = path.split('.')
        for step in path[:-1]:
            value = self.__dict__.get(step)
            if not isinstance(value, Config):
                raise ValueError('unknown option group %s' % (step,))
            self = value
        return self, path[-1]

    def getpaths(self, include_groups=False, currpath=None):
        """returns a list of all paths in self, recursively

            currpath should not be provided (helps with recursion)
        """
        if currpath is None:
            currpath = []
        paths = []
        for option in self._descr._children:
            attr = option._name
            value = getattr(self, attr)
            if isinstance(value, Config):
                if include_groups:
                    paths.append('.'.join(currpath + [attr]))
                paths += value.getpaths(include_groups=include_groups,
                                        currpath=currpath + [attr])
            else:
                paths.append('.'.join(currpath + [attr]))
        return paths


DEFAULT_OPTION_NAME = object()


class Option(object):
    def __init__(self, name, doc, default, cmdline=DEFAULT_OPTION_NAME):
        self._name = name
        self.doc = doc
        self.default = default
        self.cmdline = cmdline

    def convert(self, value):
        return value

    def validate(self, value):
        raise NotImplementedError('abstract base class')

    def setoption(self, config, value):
        value = self.convert(value)
        if not self.validate(value):
            raise ValueError('invalid value %s for option %s' %
                             (value, self._name))
        config.__dict__[self._name] = value

    def add_optparse_option(self, argnames, parser, config):
        def _callback(option, opt_str, value, parser):
            try:
                self.setoption(config, self.cmdline_value(value))
            except ValueError as e:
                raise optparse.OptionValueError(e.args[0])
        parser.add_option(help=self.doc, action='callback',
                          callback=_callback, *argnames,
                          **self.optparse_kwds())

    def optparse_kwds(self):
        return {'type': 'string'}

    def cmdline_value(self, value):
        return value


class ChoiceOption(Option):
    def __init__(self, name, doc, values, default,
                 cmdline=DEFAULT_OPTION_NAME):
        super(ChoiceOption, self).__init__(name, doc, default, cmdline)
        self.values = values

    def validate(self, value):
        return value in self.values

    def cmdline_value(self, value):
        return value.strip()

    def optparse_kwds(self):
        return {'type': 'choice', 'choices': list(self.values),
                'metavar': '|'.join(self.values)}


class BoolOption(Option):
    """On the command line, the switch alone sets the option to True."""

    def __init__(self, name, doc, default=True, cmdline=DEFAULT_OPTION_NAME):
        super(BoolOption, self).__init__(name, doc, default, cmdline)

    def validate(self, value):
        return isinstance(value, bool)

    def cmdline_value(self, value):
        return True

    def optparse_kwds(self):
        return {}


class IntOption(Option):
    def __init__(self, name, doc, default=0, cmdline=DEFAULT_OPTION_NAME):
        super(IntOption, self).__init__(name, doc, default, cmdline)

    def convert(self, value):
        if isinstance(value, bool):
            raise ValueError('invalid value %s for option %s' %
                             (value, self._name))
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValueError('invalid value %r for option %s: %s' %
                             (value, self._name, e))

    def validate(self, value):
        return isinstance(value, int)

    def optparse_kwds(self):
        return {'type': 'int', 'metavar': 'N'}


class OptionDescription(object):
    def __init__(self, name, doc, children):
        self._name = name
        self.doc = doc
        self._children = children
        for child in children:
            setattr(self, child._name, child)


def to_optparse(config, parser=None):
    """Add a switch for every option of 'config' to an optparse parser,
    one option group per description."""
    grps = {}
    def get_group(path, doc):
        if '.' not in path:
            return parser
        grpname = path.rsplit('.', 1)[0]
        grp = grps.get(grpname)
        if grp is None:
            grp = grps[grpname] = parser.add_option_group(doc)
        return grp

    if parser is None:
        parser = optparse.OptionParser()
    for path in config.getpaths():
        subconf, name = config._get_by_path(path)
        option = getattr(subconf._descr, name)
        if option.cmdline is DEFAULT_OPTION_NAME:
            chunks = ('--%s' % (path.replace('.', '-'),),)
        elif option.cmdline is None:
            continue
        else:
            chunks = option.cmdline.split(' ')
        option.add_optparse_option(chunks, get_group(path, subconf._descr.doc),
                                   subconf)
    return parser
