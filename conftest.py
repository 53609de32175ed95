# keeps the project root on sys.path so tests import the top level modules
