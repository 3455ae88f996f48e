from codehelper.api import main

main()
