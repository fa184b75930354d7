# Core module for Eunoia application
