from baseline.cli import main

raise SystemExit(main())
