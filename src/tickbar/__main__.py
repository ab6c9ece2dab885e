from tickbar.cli import main

raise SystemExit(main())
