"""Run the bloggernetes command line tool."""

from bloggernetes.tool.bloggernetes import main

if __name__ == "__main__":
    main()
